"""Shell completion script generation."""

from __future__ import annotations

from constants import APP_NAME
from model.permission import PermKind

COMMANDS = ["create", "grant", "revoke", "list", "recreate", "edit", "completion", "help"]

BASH_TEMPLATE = """\
# Bash completion for {prog}
# Install: {prog} completion bash > ~/.local/share/bash-completion/completions/{prog}

_{func}_completions() {{
    local cur prev cword
    COMPREPLY=()
    cur="${{COMP_WORDS[COMP_CWORD]}}"
    prev="${{COMP_WORDS[COMP_CWORD-1]}}"
    cword=$COMP_CWORD

    local commands="{commands}"
    local perm_types="{kinds}"

    if [[ $cword -eq 1 ]]; then
        COMPREPLY=($(compgen -W "$commands" -- "$cur"))
        return 0
    fi

    local command="${{COMP_WORDS[1]}}"
    case "$command" in
        grant|revoke|list|recreate|edit)
            if [[ $cword -eq 2 ]]; then
                local containers
                containers=$({prog} list --names 2>/dev/null)
                COMPREPLY=($(compgen -W "$containers" -- "$cur"))
            elif [[ $cword -eq 3 ]] && [[ "$command" == "grant" || "$command" == "revoke" ]]; then
                COMPREPLY=($(compgen -W "$perm_types" -- "$cur"))
            fi
            ;;
        completion)
            if [[ $cword -eq 2 ]]; then
                COMPREPLY=($(compgen -W "bash" -- "$cur"))
            fi
            ;;
    esac
    return 0
}}

complete -o bashdefault -o default -F _{func}_completions {prog}
"""


def bash_completion(prog: str = APP_NAME) -> str:
    """Return a bash completion script for prog."""
    return BASH_TEMPLATE.format(
        prog=prog,
        func=prog.replace("-", "_"),
        commands=" ".join(COMMANDS),
        kinds=" ".join(PermKind.names()),
    )
