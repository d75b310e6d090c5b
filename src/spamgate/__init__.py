"""
Spamgate - Client-Side Spam Gate for Live Comments

Spamgate decides, per submitted comment, whether it is broadcast to the other
participants of a room or kept back locally as spam.

Core Components:

- **Tokenizer**: Normalizes comment text and encodes it into a fixed-length
  sequence of vocabulary ids
- **Inference Engine**: Lazily loads a TorchScript classifier exactly once and
  scores encoded comments off the event loop
- **Moderation Gate**: Applies the configured spam threshold to a score
- **Submission Controller**: Runs one submission at a time through the pipeline
  and publishes accepted comments
- **Broadcast Channel**: Publish/subscribe seam to the other participants
- **Interactive Console**: Prompt-based comment client for local use

Usage:
    from spamgate.main import main
    main()  # Starts the console client
"""
