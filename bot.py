#!/usr/bin/env python3
"""
Presence Bot - Entry Point

Discord bot announcing a player's status, games and Dota 2 match results.
The actual implementation is in the presencebot package.
"""

if __name__ == "__main__":
    from presencebot import main
    main()
