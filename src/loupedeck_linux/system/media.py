"""Media player control through playerctl (MPRIS)."""

import logging
from dataclasses import dataclass

from loupedeck_linux.exceptions import SystemControlError
from loupedeck_linux.system.process import CommandRunner, run_command

logger = logging.getLogger(__name__)

PLAYING = "Playing"
PAUSED = "Paused"
STOPPED = "Stopped"

_METADATA_FORMAT = "{{title}}\t{{artist}}\t{{album}}"


@dataclass(frozen=True)
class MediaMetadata:
    title: str = ""
    artist: str = ""
    album: str = ""
    status: str = STOPPED


class MediaControl:
    """Controls the active MPRIS player."""

    def __init__(self, runner: CommandRunner = run_command):
        self._run = runner

    async def status(self) -> str:
        """``Playing``, ``Paused`` or ``Stopped`` (also when no player runs)."""
        try:
            output = await self._run(["playerctl", "status"])
        except SystemControlError as e:
            logger.debug(f"No media status: {e.detail}")
            return STOPPED
        return output if output in (PLAYING, PAUSED) else STOPPED

    async def metadata(self) -> MediaMetadata:
        """Title, artist and album of the current track plus the player status."""
        status = await self.status()
        try:
            output = await self._run(["playerctl", "metadata", "--format", _METADATA_FORMAT])
        except SystemControlError as e:
            logger.debug(f"No media metadata: {e.detail}")
            return MediaMetadata(status=status)

        title, artist, album = (output.split("\t") + ["", "", ""])[:3]
        return MediaMetadata(title=title, artist=artist, album=album, status=status)

    async def toggle_play_pause(self) -> str:
        """Toggle playback and return the resulting status."""
        await self._run(["playerctl", "play-pause"])
        return await self.status()

    async def next(self) -> None:
        await self._run(["playerctl", "next"])

    async def previous(self) -> None:
        await self._run(["playerctl", "previous"])
