import json
from typing import Any, Optional

import click

from .._config import ParameterEncoding, WSLogLevel
from .._utils.constants import ENV_BASE_URL
from .._ws import WS


def parse_pairs(values: tuple[str, ...], separator: str, label: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for value in values:
        key, sep, rest = value.partition(separator)
        if not sep or not key.strip():
            raise click.BadParameter(
                f"Expected {label} in the form KEY{separator}VALUE, got '{value}'"
            )
        pairs[key.strip()] = rest.strip() if separator == ":" else rest
    return pairs


def call_options(function):
    function = click.option(
        "--json-body",
        is_flag=True,
        default=False,
        help="Send parameters as a JSON body instead of a form body",
    )(function)
    function = click.option(
        "--log-level",
        type=click.Choice([level.value for level in WSLogLevel]),
        default=None,
        help="Log calls (and responses) to stderr",
    )(function)
    function = click.option(
        "--param",
        "-p",
        "params",
        multiple=True,
        help="Parameter as KEY=VALUE (repeatable)",
    )(function)
    function = click.option(
        "--header",
        "-H",
        "headers",
        multiple=True,
        help="Header as 'Name: value' (repeatable)",
    )(function)
    function = click.option(
        "--base-url",
        envvar=ENV_BASE_URL,
        required=True,
        help=f"Base URL of the webservice (or set {ENV_BASE_URL})",
    )(function)
    return function


def create_ws(
    base_url: str,
    headers: tuple[str, ...],
    log_level: Optional[str],
    json_body: bool,
) -> WS:
    config: dict[str, Any] = {
        "headers": parse_pairs(headers, ":", "header"),
        "shows_network_activity_indicator": False,
        "post_parameter_encoding": (
            ParameterEncoding.JSON if json_body else ParameterEncoding.FORM
        ),
    }
    if log_level:
        config["log_levels"] = WSLogLevel(log_level)
    return WS(base_url, **config)


def echo_json(value: Any) -> None:
    if value is None:
        return
    click.echo(json.dumps(value, indent=2, default=str))
