import typer

from auto_filename.cli.rename import derive_name, rename, rename_all, rename_selection
from auto_filename.cli.watch import watch

app = typer.Typer(
    name="auto-filename",
    help="Auto Filename: keep Markdown filenames in sync with their content.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("derive")(derive_name)
app.command("rename")(rename)
app.command("rename-all")(rename_all)
app.command("rename-selection")(rename_selection)
app.command("watch")(watch)


def main() -> None:
    app()
