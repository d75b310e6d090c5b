"""
Loading of the serialized spam model.

The model artifact is a TorchScript module, addressed by a local path or an
http(s) URL. Everything here is blocking; the inference engine runs it through
``asyncio.to_thread``.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, List, Protocol, Sequence
from urllib.parse import urlparse

import requests

from spamgate.util.logger import get_logger

logger = get_logger("model_loader")

DOWNLOAD_TIMEOUT_SECONDS = 60
CACHE_DIR = Path(tempfile.gettempdir()) / "spamgate-models"


class ScoringModel(Protocol):
    """Anything that maps a batch of encodings to per-class probabilities."""

    def predict(self, batch: Sequence[Sequence[int]]) -> List[List[float]]:
        ...


class TorchScriptModel:
    """Wrap a TorchScript module behind the :class:`ScoringModel` interface.

    Attributes:
        module: The loaded ``torch.jit.ScriptModule`` in eval mode.
        device: Torch device the module and inputs live on.
    """

    def __init__(self, module: Any, device: str = "cpu") -> None:
        self.module = module
        self.device = device

    def predict(self, batch: Sequence[Sequence[int]]) -> List[List[float]]:
        import torch

        inputs = torch.tensor([list(row) for row in batch], dtype=torch.int64, device=self.device)
        with torch.no_grad():
            outputs = self.module(inputs)
        return outputs.detach().cpu().tolist()


def is_remote(location: str) -> bool:
    return urlparse(location).scheme in {"http", "https"}


def download_model(url: str, cache_dir: Path = CACHE_DIR) -> Path:
    """Download a remote model artifact into the local cache and return its path."""
    cache_dir.mkdir(parents=True, exist_ok=True)
    name = Path(urlparse(url).path).name or "model.pt"
    target = cache_dir / name

    logger.info("[MODEL LOADER] Downloading model from %s", url)
    response = requests.get(url, timeout=DOWNLOAD_TIMEOUT_SECONDS)
    response.raise_for_status()
    target.write_bytes(response.content)
    logger.debug("[MODEL LOADER] Stored %d bytes at %s", len(response.content), target)
    return target


def load_torchscript_model(location: str, device: str = "cpu") -> TorchScriptModel:
    """Resolve ``location`` and load the TorchScript module found there.

    Raises:
        FileNotFoundError: If a local path does not exist.
        requests.RequestException: If a remote download fails.
        RuntimeError: If torch cannot deserialize the artifact.
    """
    path = download_model(location) if is_remote(location) else Path(location).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Model artifact not found: {path}")

    import torch

    module = torch.jit.load(str(path), map_location=device)
    module.eval()
    logger.info("[MODEL LOADER] Loaded TorchScript model from %s on %s", path, device)
    return TorchScriptModel(module, device=device)
