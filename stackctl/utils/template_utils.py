"""Template processing utilities"""

import os
import string
from typing import Any, Dict, Mapping, Optional


def render_template(template: str,
                    defaults: Optional[Dict[str, Any]] = None,
                    environ: Optional[Mapping[str, str]] = None,
                    safe: bool = True) -> str:
    """
    Render ``${VAR}`` placeholders from the environment

    Args:
        template: Template string
        defaults: Values used when a variable is not set in the environment
        environ: Environment mapping (defaults to os.environ)
        safe: Use safe substitution (leave unknown placeholders untouched)

    Returns:
        Rendered string
    """
    if environ is None:
        environ = os.environ

    context = {key: str(value) for key, value in (defaults or {}).items()}
    context.update({key: value for key, value in environ.items() if value != ""})

    tmpl = string.Template(template)

    if safe:
        return tmpl.safe_substitute(context)
    else:
        return tmpl.substitute(context)

