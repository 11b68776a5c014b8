from __future__ import annotations

import discord

from .api import OpenDotaClient, SteamClient
from .config import Config, logger
from .heroes import HeroCatalog
from .http import ApiError
from .localization import Localization, load_localization
from .notifier import DiscordChannelSink, NotificationDispatcher
from .presence import PresenceEventHandler, PresenceUpdate
from .state import SharedPlayerState
from .supervisor import WatcherSupervisor
from .watchers import MatchPoller, SteamPoller


class PresenceBot(discord.Client):
    """Gateway client: forwards presence events and (re)starts the pollers."""

    def __init__(self, config: Config, locale: Localization) -> None:
        intents = discord.Intents.default()
        intents.guild_messages = True
        intents.dm_messages = True
        intents.message_content = True
        intents.presences = True
        intents.members = True
        super().__init__(intents=intents)

        self.config = config
        self.locale = locale
        self.player_state = SharedPlayerState()
        self.dispatcher = NotificationDispatcher(DiscordChannelSink(self), config.output_channel)
        self.presence_handler = PresenceEventHandler(
            config.target_guild, config.target_user, self.player_state, self.dispatcher, locale
        )
        self.opendota = OpenDotaClient(config.opendota_api_url)
        self.supervisor = WatcherSupervisor(build_watchers(config, locale, self.opendota, self.player_state, self.dispatcher))

    async def setup_hook(self) -> None:
        await startup_health_check(self.config, self.opendota)

    async def on_ready(self) -> None:
        logger.info(f"{self.user} is connected!")
        try:
            await self.change_presence(activity=discord.CustomActivity(name=self.locale.bot_activity))
        except Exception as e:
            logger.warning(f"⚠️ Failed to set bot activity: {e}")
        await self.supervisor.restart()

    async def on_resumed(self) -> None:
        logger.info("Gateway session resumed, restarting watchers")
        await self.supervisor.restart()

    async def on_presence_update(self, before: discord.Member, after: discord.Member) -> None:
        await self.presence_handler.handle(PresenceUpdate.from_member(after))

    async def on_message(self, message: discord.Message) -> None:
        if not self.config.reactions_enabled or message.author.id != self.config.target_user:
            return
        emoji = discord.PartialEmoji(name=self.config.emoji_name, id=self.config.emoji_id, animated=False)
        try:
            await message.add_reaction(emoji)
        except discord.HTTPException as e:
            logger.error(f"Error reacting to message: {e}")

    async def close(self) -> None:
        await self.supervisor.stop()
        await super().close()


def build_watchers(config: Config, locale: Localization, opendota: OpenDotaClient,
                   state: SharedPlayerState, dispatcher: NotificationDispatcher) -> list:
    watchers = [
        MatchPoller(
            opendota,
            HeroCatalog(opendota),
            config.target_steamid32,
            dispatcher,
            locale,
            interval=config.match_poll_secs,
        )
    ]
    if config.steam_api_key:
        watchers.append(
            SteamPoller(
                SteamClient(config.steam_api_key, config.steam_api_url),
                config.target_steamid64,
                state,
                dispatcher,
                locale,
                interval=config.steam_poll_secs,
            )
        )
    return watchers


async def startup_health_check(config: Config, opendota: OpenDotaClient | None = None) -> bool:
    """Perform health check on bot startup"""
    opendota = opendota or OpenDotaClient(config.opendota_api_url)
    logger.info("🏥 Running startup health check...")
    try:
        profile = await opendota.get_player_profile(config.target_steamid32)
    except ApiError as e:
        logger.error(f"❌ OpenDota health check failed: {e}")
        return False

    if not profile:
        logger.error(f"❌ OpenDota has no public profile for account {config.target_steamid32}")
        return False
    logger.info(f"✅ Tracking {profile.get('personaname', 'Unknown')} (account {config.target_steamid32})")
    return True


def main():
    try:
        config = Config.from_env()
        locale = load_localization(config.localization_file)
    except ValueError as e:
        raise SystemExit(f"❌ {e}. Check your .env and localization file.")

    bot = PresenceBot(config, locale)
    bot.run(config.discord_token, log_handler=None)
