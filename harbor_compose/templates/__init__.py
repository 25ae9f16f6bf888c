#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Jinja2 templates of the files generated by harbor-compose
"""

from __future__ import annotations

from os import path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from harbor_compose import __version__


def render_template(template_name: str, **context) -> str:
    """
    Renders one of the templates of this package. The harbor-compose version is available
    to all templates as version.

    :param str template_name: file name of the template
    :rtype: str
    """
    here = path.abspath(path.dirname(__file__))
    jinja_env = Environment(
        loader=FileSystemLoader(here),
        autoescape=False,
        auto_reload=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )
    template = jinja_env.get_template(template_name)
    return template.render(version=__version__, **context)
