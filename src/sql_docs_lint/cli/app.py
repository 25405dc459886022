import typer

from sql_docs_lint.cli.check import check
from sql_docs_lint.cli.watch import watch

app = typer.Typer(
    name="sql-docs-lint",
    help="Lint the SQL examples, template markers and links of a documentation corpus.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("check")(check)
app.command("watch")(watch)


def main() -> None:
    app()
