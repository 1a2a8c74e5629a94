"""Static shell completion scripts for the top-level ``near`` command."""

from __future__ import annotations

from typing import Sequence

SHELLS = ("bash", "zsh", "fish")

COMPLETIONS_COMMAND = "generate-shell-completions"


def generate_completion_script(shell: str, commands: Sequence[str], prog: str = "near") -> str:
    words = " ".join([*commands, COMPLETIONS_COMMAND])
    if shell == "bash":
        return f"complete -W \"{words}\" {prog}\n"
    if shell == "zsh":
        return f"#compdef {prog}\n_arguments '1:command:({words})'\n"
    if shell == "fish":
        return "".join(
            f"complete -c {prog} -n __fish_use_subcommand -f -a {word}\n" for word in words.split()
        )
    raise ValueError(f"unsupported shell '{shell}' (choose from: {', '.join(SHELLS)})")
