import os
import tempfile
from pathlib import Path


def atomic_save_bytes(filepath: str | Path, data: bytes) -> None:
    """Atomically write data to filepath.
    Readers see either the previous file or the complete new one.
    """
    if not isinstance(filepath, (str, Path)):
        raise TypeError("filepath must be a string or Path")

    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode='wb',
        dir=filepath.parent,
        delete=False,
        suffix='.tmp'
    ) as temp_file:
        temp_path = temp_file.name

        try:
            temp_file.write(data)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        except Exception:
            temp_file.close()
            os.unlink(temp_path)
            raise

    try:
        os.replace(temp_path, filepath)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise
