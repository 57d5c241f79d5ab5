"""System volume control through PipeWire (wpctl) or PulseAudio (pactl)."""

import logging
import re
import shutil
from dataclasses import dataclass

from loupedeck_linux.exceptions import SystemControlError
from loupedeck_linux.system.process import CommandRunner, run_command

logger = logging.getLogger(__name__)

WPCTL_SINK = "@DEFAULT_AUDIO_SINK@"
PACTL_SINK = "@DEFAULT_SINK@"

_WPCTL_VOLUME = re.compile(r"Volume:\s*([0-9.]+)(\s*\[MUTED\])?")
_PACTL_PERCENT = re.compile(r"(\d+)%")


@dataclass(frozen=True)
class VolumeState:
    volume: int  # 0-100
    muted: bool


def clamp_volume(value: float) -> int:
    return max(0, min(100, round(value)))


def detect_backend() -> str | None:
    """Prefer wpctl, fall back to pactl, None when neither is installed."""
    if shutil.which("wpctl"):
        return "wpctl"
    if shutil.which("pactl"):
        return "pactl"
    return None


class VolumeControl:
    """
    Reads and changes the default output volume.

    Args:
        backend: ``"wpctl"`` or ``"pactl"``; auto-detected when None
        runner: Command runner (tests inject a fake)
    """

    def __init__(self, backend: str | None = None, runner: CommandRunner = run_command):
        self.backend = backend or detect_backend()
        self._run = runner
        if self.backend is None:
            logger.warning("Neither wpctl nor pactl found; volume control disabled")
        else:
            logger.info(f"Volume control using {self.backend}")

    @property
    def available(self) -> bool:
        return self.backend is not None

    def _require_backend(self) -> str:
        if self.backend is None:
            raise SystemControlError(["wpctl"], "no volume backend available")
        return self.backend

    async def get_state(self) -> VolumeState:
        """Current volume (0-100) and mute flag."""
        if self._require_backend() == "wpctl":
            output = await self._run(["wpctl", "get-volume", WPCTL_SINK])
            match = _WPCTL_VOLUME.search(output)
            if match is None:
                raise SystemControlError(["wpctl", "get-volume"], f"unexpected output {output!r}")
            return VolumeState(
                volume=clamp_volume(float(match.group(1)) * 100),
                muted=match.group(2) is not None,
            )

        volume_output = await self._run(["pactl", "get-sink-volume", PACTL_SINK])
        match = _PACTL_PERCENT.search(volume_output)
        if match is None:
            raise SystemControlError(["pactl", "get-sink-volume"], f"unexpected output {volume_output!r}")
        mute_output = await self._run(["pactl", "get-sink-mute", PACTL_SINK])
        return VolumeState(volume=clamp_volume(int(match.group(1))), muted="yes" in mute_output.lower())

    async def get_volume(self) -> int:
        return (await self.get_state()).volume

    async def is_muted(self) -> bool:
        return (await self.get_state()).muted

    async def set_volume(self, volume: float) -> int:
        """Set the volume, clamped to 0-100. Returns the value applied."""
        target = clamp_volume(volume)
        if self._require_backend() == "wpctl":
            await self._run(["wpctl", "set-volume", WPCTL_SINK, f"{target / 100:.2f}"])
        else:
            await self._run(["pactl", "set-sink-volume", PACTL_SINK, f"{target}%"])
        logger.debug(f"Volume set to {target}%")
        return target

    async def adjust_volume(self, delta: int) -> int:
        """Change the volume by ``delta`` percent points. Returns the new volume."""
        current = await self.get_volume()
        return await self.set_volume(current + delta)

    async def toggle_mute(self) -> bool:
        """Toggle mute. Returns the new mute state."""
        if self._require_backend() == "wpctl":
            await self._run(["wpctl", "set-mute", WPCTL_SINK, "toggle"])
        else:
            await self._run(["pactl", "set-sink-mute", PACTL_SINK, "toggle"])
        muted = await self.is_muted()
        logger.info(f"Audio {'muted' if muted else 'unmuted'}")
        return muted
