"""
Spam classification for Spamgate.

- **tokenizer.py**: Normalizes comment text and encodes it into fixed-length
  vocabulary id sequences.
- **model_loader.py**: Resolves and deserializes the TorchScript model artifact.
- **inference_engine.py**: Loads the model once, lazily, and scores encodings
  off the event loop.
- **engine_lifecycle.py**: Warm-up, restart and shutdown of the engine.
- **errors.py**: ModelUnavailable and MalformedInput.
"""
