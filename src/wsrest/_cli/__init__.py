import click

from .cli_call import delete, get, patch, post, put, upload


@click.group()
@click.version_option(package_name="wsrest")
def cli() -> None:
    r"""Issue REST calls from the command line.

    \b
    Examples:
        wsrest get /items --base-url https://api.example.com -p page=1
        wsrest post /items -p name=foo --json-body
        wsrest upload /avatar --file me.png --method put
    """


cli.add_command(get)
cli.add_command(post)
cli.add_command(put)
cli.add_command(patch)
cli.add_command(delete)
cli.add_command(upload)
