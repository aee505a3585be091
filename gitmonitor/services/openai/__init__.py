from gitmonitor.services.openai.commit_message_service import (
    CommitMessageError,
    CommitMessageGenerator,
    GenerationFailedError,
    MissingCredentialError,
)

__all__ = [
    "CommitMessageError",
    "CommitMessageGenerator",
    "GenerationFailedError",
    "MissingCredentialError",
]
