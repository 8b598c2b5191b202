from typing import Dict, NamedTuple, Tuple

# Conventional commit type -> (emoji, meaning). Order is the order rendered.
COMMIT_TYPES: Dict[str, Tuple[str, str]] = {
    "feat": ("✨", "new feature"),
    "fix": ("🐛", "bug fix"),
    "docs": ("📚", "documentation"),
    "style": ("💄", "formatting, styling"),
    "refactor": ("🔨", "code refactoring"),
    "test": ("✅", "adding tests"),
    "chore": ("🔧", "maintenance tasks"),
    "perf": ("🐎", "performance improvement"),
    "ci": ("💚", "continuous integration"),
    "build": ("📦", "build system"),
    "revert": ("⏪", "reverting changes"),
    "security": ("🔒", "security improvements"),
    "deps": ("⬆️", "dependency updates"),
    "remove": ("🔥", "removing code/files"),
    "wip": ("🚧", "work in progress"),
}

SUMMARY_MAX_CHARS = 50
BODY_WRAP_CHARS = 72

_EXAMPLES = [
    "feat: ✨Add user authentication system",
    "fix: 🐛Resolve memory leak in data processing",
    "docs: 📚Update API documentation",
    "refactor: 🔨Simplify user service logic",
]


class Prompt(NamedTuple):
    system_instruction: str
    user_prompt: str


def _render_system_instruction() -> str:
    lines = [
        "You are an expert developer tasked with creating meaningful Git commit messages based on code diffs.",
        "",
        "Generate a single commit message that follows these guidelines:",
        "",
        "1. Use conventional commit format: <type>: <emoji><message>",
        "2. Include the emoji that matches the change type",
        f"3. Keep the summary line under {SUMMARY_MAX_CHARS} characters when possible",
        "4. Use the imperative mood (e.g. 'Add feature', not 'Added feature')",
        "5. Be specific and descriptive about what changed",
        "6. If there are multiple changes, focus on the most significant one",
        f"7. If a body is needed, separate it from the summary with a blank line and wrap it at {BODY_WRAP_CHARS} characters",
        "",
        "Commit Types and Emojis:",
    ]
    for commit_type, (emoji, meaning) in COMMIT_TYPES.items():
        lines.append(f"- {commit_type}: {emoji} ({meaning})")

    lines.append("")
    lines.append("Examples:")
    for example in _EXAMPLES:
        lines.append(f'- "{example}"')

    lines.append("")
    lines.append("Do not wrap the message in quotes, backticks or markdown. Output only the commit message.")
    return "\n".join(lines)


SYSTEM_INSTRUCTION = _render_system_instruction()


def build_prompt(diff: str) -> Prompt:
    """Render the system instruction and the user prompt for a diff.

    The diff is embedded verbatim; the same diff always yields the same prompt.
    """
    user_prompt = "\n".join([
        "Git diff:",
        "```",
        diff,
        "```",
        "",
        "Generate only the commit message, nothing else:",
    ])
    return Prompt(system_instruction=SYSTEM_INSTRUCTION, user_prompt=user_prompt)
