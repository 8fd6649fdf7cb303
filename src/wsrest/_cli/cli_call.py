import asyncio
import mimetypes
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import click
from httpx import HTTPError

from .._config import WSHTTPVerb
from .._utils.constants import DEFAULT_MIME_TYPE
from .._ws import WS
from ..models.errors import WSParsingError
from ._common import call_options, create_ws, echo_json, parse_pairs


def _run(call: Callable[[], Awaitable[Any]]) -> Any:
    async def _main() -> Any:
        return await call()

    try:
        return asyncio.run(_main())
    except (HTTPError, WSParsingError) as e:
        raise click.ClickException(str(e)) from e


def _verb_command(verb: WSHTTPVerb) -> click.Command:
    @click.command(name=verb.value.lower(), help=f"Send a {verb.value} request.")
    @click.argument("url")
    @click.option(
        "--no-body",
        is_flag=True,
        default=False,
        help="Ignore the response body, only report success",
    )
    @call_options
    def command(
        url: str,
        no_body: bool,
        base_url: str,
        headers: tuple[str, ...],
        params: tuple[str, ...],
        log_level: Optional[str],
        json_body: bool,
    ) -> None:
        ws = create_ws(base_url, headers, log_level, json_body)
        call = getattr(ws, verb.value.lower())
        result = _run(
            lambda: call(url, parse_pairs(params, "=", "param"), returns_json=not no_body)
        )
        if no_body:
            click.echo("OK")
        else:
            echo_json(result)

    return command


get = _verb_command(WSHTTPVerb.GET)
post = _verb_command(WSHTTPVerb.POST)
put = _verb_command(WSHTTPVerb.PUT)
patch = _verb_command(WSHTTPVerb.PATCH)
delete = _verb_command(WSHTTPVerb.DELETE)


@click.command()
@click.argument("url")
@click.option(
    "--file",
    "file_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File to upload",
)
@click.option("--name", default="file", show_default=True, help="Form field name")
@click.option("--mime-type", default=None, help="MIME type (guessed from the file name)")
@click.option(
    "--method",
    type=click.Choice(["post", "put", "patch"]),
    default="post",
    show_default=True,
)
@call_options
def upload(
    url: str,
    file_path: Path,
    name: str,
    mime_type: Optional[str],
    method: str,
    base_url: str,
    headers: tuple[str, ...],
    params: tuple[str, ...],
    log_level: Optional[str],
    json_body: bool,
) -> None:
    """Upload a file as multipart/form-data."""
    ws: WS = create_ws(base_url, headers, log_level, json_body)
    upload_call = getattr(ws, f"{method}_multipart")
    result = _run(
        lambda: upload_call(
            url,
            parse_pairs(params, "=", "param"),
            name=name,
            data=file_path.read_bytes(),
            file_name=file_path.name,
            mime_type=mime_type
            or mimetypes.guess_type(file_path.name)[0]
            or DEFAULT_MIME_TYPE,
        )
    )
    echo_json(result)
