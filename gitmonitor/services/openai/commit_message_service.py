"""
Commit message generation with the OpenAI API.

Turns a working-tree diff into a commit title and body:
- The diff is cut to a bounded size before it is sent
- Exactly one chat completion request per message (no SDK retries)
- The reply is parsed as "title / blank line / body"
"""

import logging
from typing import List

from openai import AsyncOpenAI, OpenAIError

from gitmonitor.common.config.config import (
    COMMIT_MESSAGE_LANGUAGE,
    DIFF_CHAR_LIMIT,
    DIFF_TRUNCATION_MARKER,
    OPENAI_MAX_TOKENS,
    OPENAI_MODEL,
    OPENAI_TIMEOUT,
)
from gitmonitor.models.types import CommitDraft, ErrorKind

logger = logging.getLogger(__name__)

COMMIT_MESSAGE_PROMPT = """You are a Git expert. Analyze the changes below and write a commit message in {language}.

Required format (reply ONLY with the message, no extra explanation):
Line 1: short, direct title (at most 60 characters), in the imperative mood (e.g. "Add", "Fix", "Update")
Line 2: blank
Following lines: concise description of the main changes (at most 3 lines)

Changes:
```
{diff}
```"""


class CommitMessageError(Exception):
    """Base class for commit message generation failures."""

    error_kind = ErrorKind.GENERATION_FAILED


class MissingCredentialError(CommitMessageError):
    """No inference API key is configured."""

    error_kind = ErrorKind.MISSING_CREDENTIAL


class GenerationFailedError(CommitMessageError):
    """The inference request failed or returned nothing usable."""

    error_kind = ErrorKind.GENERATION_FAILED


def truncate_diff(diff: str, limit: int = DIFF_CHAR_LIMIT) -> str:
    """Bound the diff size, appending a marker when anything was cut.

    Slicing a str works on whole code points, so the cut never splits a
    multibyte character; a dangling high surrogate is dropped as well.
    """
    if len(diff) <= limit:
        return diff
    head = diff[:limit]
    if head and "\ud800" <= head[-1] <= "\udbff":
        head = head[:-1]
    return head + DIFF_TRUNCATION_MARKER


def build_commit_prompt(diff: str, language: str = COMMIT_MESSAGE_LANGUAGE) -> str:
    return COMMIT_MESSAGE_PROMPT.format(language=language, diff=truncate_diff(diff))


def parse_commit_message(text: str) -> CommitDraft:
    """Split a model reply into title (first line) and body (remaining lines).

    Raises:
        GenerationFailedError: If the reply holds no title
    """
    lines: List[str] = [
        line for line in (text or "").strip().splitlines()
        if not line.strip().startswith("```")
    ]
    while lines and not lines[0].strip():
        lines.pop(0)
    if not lines:
        raise GenerationFailedError("empty response from the model")

    title = lines[0].strip()
    body = "\n".join(line.strip() for line in lines[1:] if line.strip())
    return CommitDraft(title=title, body=body)


class CommitMessageGenerator:
    """Generates a CommitDraft from a diff with one chat completion call."""

    def __init__(
        self,
        model: str = OPENAI_MODEL,
        max_tokens: int = OPENAI_MAX_TOKENS,
        timeout: float = OPENAI_TIMEOUT,
        language: str = COMMIT_MESSAGE_LANGUAGE,
    ):
        self.model_name = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.language = language

    async def generate(self, diff: str, api_key: str) -> CommitDraft:
        """Generate a commit message for a diff.

        Args:
            diff: Staged and unstaged diff text (or status text when no diff)
            api_key: OpenAI API key

        Returns:
            CommitDraft with title and body

        Raises:
            MissingCredentialError: If api_key is empty
            GenerationFailedError: If the request fails or the reply is empty
        """
        if not api_key or not api_key.strip():
            raise MissingCredentialError("OpenAI API key is not configured")

        prompt = build_commit_prompt(diff, self.language)
        try:
            async with AsyncOpenAI(
                api_key=api_key, timeout=self.timeout, max_retries=0
            ) as client:
                response = await client.chat.completions.create(
                    model=self.model_name,
                    messages=[{"role": "user", "content": prompt}],
                    max_tokens=self.max_tokens,
                )
        except OpenAIError as e:
            logger.error(f"Commit message generation failed: {e}")
            raise GenerationFailedError(str(e) or type(e).__name__) from e

        if not response.choices:
            raise GenerationFailedError("model returned no choices")

        content = response.choices[0].message.content or ""
        draft = parse_commit_message(content)
        logger.info(f"Generated commit title: {draft.title}")
        return draft
