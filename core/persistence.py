"""
Patch file I/O for the .lambpatch format.

File format:
- MessagePack binary format (fast, compact)
- Contains: PanelState (root/scale + every voice state)
- Auto-save slot restored on next launch
"""
from pathlib import Path
from typing import Optional, Union

import msgpack

from core.models import PanelState

PATCH_SUFFIX = ".lambpatch"


class PatchFile:
    """Handles .lambpatch file I/O."""

    @staticmethod
    def save(panel: PanelState, path: Union[str, Path]) -> Path:
        """
        Save panel state to a .lambpatch file.

        Args:
            panel: Panel state to save
            path: Destination file path (suffix is forced to .lambpatch)

        Returns:
            Path actually written

        Raises:
            IOError: If save fails
        """
        path = Path(path)
        if path.suffix != PATCH_SUFFIX:
            path = path.with_suffix(PATCH_SUFFIX)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            packed_data = msgpack.packb(panel.to_dict(), use_bin_type=True)
            with open(path, "wb") as f:
                f.write(packed_data)
        except Exception as e:
            raise IOError(f"Failed to save patch to {path}: {e}") from e

        return path

    @staticmethod
    def load(path: Union[str, Path]) -> PanelState:
        """
        Load panel state from a .lambpatch file.

        Raises:
            IOError: If the file cannot be read
            ValueError: If the file is not a valid patch
        """
        path = Path(path)
        if not path.exists():
            raise IOError(f"Patch file not found: {path}")

        try:
            with open(path, "rb") as f:
                packed_data = f.read()
        except OSError as e:
            raise IOError(f"Failed to load patch from {path}: {e}") from e

        try:
            data = msgpack.unpackb(packed_data, raw=False)
            if not isinstance(data, dict):
                raise ValueError("patch root must be a map")

            version = str(data.get("version", "unknown"))
            if not version.startswith("1."):
                raise ValueError(f"Incompatible patch version: {version}. Expected 1.x")

            return PanelState.from_dict(data)
        except (msgpack.exceptions.UnpackException, msgpack.exceptions.ExtraData,
                ValueError, TypeError, KeyError) as e:
            raise ValueError(f"Invalid {PATCH_SUFFIX} file {path}: {e}") from e

    @staticmethod
    def get_auto_save_path(base_dir: Optional[Path] = None) -> Path:
        """Path of the auto-save slot."""
        base_dir = base_dir or (Path.home() / ".lambvoice")
        return base_dir / f"autosave{PATCH_SUFFIX}"

    @staticmethod
    def auto_save(panel: PanelState, base_dir: Optional[Path] = None):
        """Save to the auto-save slot; failures are reported, not raised."""
        try:
            PatchFile.save(panel, PatchFile.get_auto_save_path(base_dir))
        except IOError as e:
            print(f"[PATCH] Auto-save failed: {e}")

    @staticmethod
    def load_auto_save(base_dir: Optional[Path] = None) -> Optional[PanelState]:
        """Load the auto-save slot, or None if missing or unreadable."""
        path = PatchFile.get_auto_save_path(base_dir)
        if not path.exists():
            return None
        try:
            return PatchFile.load(path)
        except (IOError, ValueError) as e:
            print(f"[PATCH] Ignoring auto-save: {e}")
            return None
