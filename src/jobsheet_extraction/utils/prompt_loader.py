"""Utility for loading and rendering prompt templates from markdown files."""

import logging
from pathlib import Path
from typing import Any, Dict, List

import frontmatter
from jinja2 import Template

logger = logging.getLogger(__name__)

# Point to prompts directory relative to this file
PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

_ROLE_MARKERS = {"system:": "system", "user:": "user"}


def load_prompt(prompt_name: str, **kwargs) -> Dict[str, Any]:
    """
    Load a markdown prompt file, parse frontmatter config, and render Jinja2 template.

    Role markers are split out before rendering, so document text passed in
    ``kwargs`` can never open a new message.

    Args:
        prompt_name: Name of the prompt file (without .md extension)
        **kwargs: Variables to pass to Jinja2 template rendering

    Returns:
        Dictionary with two keys:
            - config: Dictionary of YAML frontmatter configuration
            - messages: List of message dictionaries for the chat API

    Raises:
        FileNotFoundError: If prompt file does not exist
        ValueError: If prompt format is invalid

    Example:
        >>> prompt_data = load_prompt("field_extraction", display_name="Date", ...)
        >>> config = prompt_data["config"]
        >>> messages = prompt_data["messages"]
    """
    prompt_path = PROMPTS_DIR / f"{prompt_name}.md"

    if not prompt_path.exists():
        raise FileNotFoundError(
            f"Prompt file not found: {prompt_path}. "
            f"Expected location: {PROMPTS_DIR}"
        )

    logger.debug(f"Loading prompt from: {prompt_path}")

    try:
        with open(prompt_path, "r", encoding="utf-8") as f:
            post = frontmatter.load(f)
    except Exception as e:
        raise ValueError(f"Failed to parse prompt file {prompt_path}: {e}")

    config = post.metadata
    templates = _parse_messages(post.content)

    try:
        messages = [
            {"role": m["role"], "content": Template(m["content"]).render(**kwargs).strip()}
            for m in templates
        ]
    except Exception as e:
        raise ValueError(f"Failed to render Jinja2 template: {e}")

    return {
        "config": config,
        "messages": messages,
    }


def _parse_messages(content: str) -> List[Dict[str, str]]:
    """
    Split prompt content into role-tagged messages.

    Expects content with role markers on their own line:
        system:
        <system message content>

        user:
        <user message content>

    Raises:
        ValueError: If no role marker is present
    """
    messages = []
    current_role = None
    current_content: List[str] = []

    for line in content.split("\n"):
        role = _ROLE_MARKERS.get(line.strip())
        if role:
            if current_role and current_content:
                messages.append({
                    "role": current_role,
                    "content": "\n".join(current_content).strip()
                })
            current_role = role
            current_content = []
        elif current_role:
            current_content.append(line)

    if current_role and current_content:
        messages.append({
            "role": current_role,
            "content": "\n".join(current_content).strip()
        })

    if not messages:
        raise ValueError(
            "Invalid prompt format. Expected 'system:' and/or 'user:' markers"
        )

    logger.debug(f"Parsed {len(messages)} messages from prompt")
    return messages
