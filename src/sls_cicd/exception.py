import click


class CLIException(click.ClickException):
    def __init__(self, *args, description: str = "Something happend..."):
        super().__init__(description)
        self.description = description
