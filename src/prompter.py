"""
Interactive prompts for the `init` and `configure` commands.
"""

import click

from models import FunctionOptions, LambdaConfig, ProjectAnswers, UserDefaults


class Prompter:
    """Collects answers from the terminal with click prompts."""

    def collect_config(self, defaults: LambdaConfig) -> LambdaConfig:
        """
        Ask for every field of the configuration record.

        Args:
            defaults: Values offered as prompt defaults

        Returns:
            Validated LambdaConfig

        Raises:
            ConfigValidationError: If the answers break the schema
        """
        opts = defaults.function_options
        function_name = click.prompt("Function name", default=opts.function_name)
        region = click.prompt("Region", default=defaults.region)
        description = click.prompt(
            "Description", default=opts.description, show_default=False
        )
        role = click.prompt("Role arn", default=opts.role or None)
        handler = click.prompt("Handler", default=opts.handler)
        memory_size = click.prompt(
            "MemorySize", default=opts.memory_size, type=click.IntRange(min=1)
        )
        timeout = click.prompt(
            "Timeout", default=opts.timeout, type=click.IntRange(min=1)
        )
        runtime = click.prompt("Runtime", default=opts.runtime)

        config = LambdaConfig(
            region=region.strip(),
            function_options=FunctionOptions(
                function_name=function_name.strip(),
                description=description.strip(),
                role=role.strip(),
                handler=handler.strip(),
                memory_size=memory_size,
                timeout=timeout,
                runtime=runtime.strip(),
            ),
        )
        config.validate()
        return config

    def collect_project(self, defaults: UserDefaults) -> ProjectAnswers:
        """Ask for the new project's metadata."""
        base = ProjectAnswers()
        return ProjectAnswers(
            name=click.prompt("Project name", default=base.name),
            version=click.prompt("Project version", default=base.version),
            description=click.prompt(
                "Project description", default="", show_default=False
            ),
            author_name=click.prompt(
                "Project author name", default=defaults.author_name, show_default=False
            ),
            author_email=click.prompt(
                "Project author email",
                default=defaults.author_email,
                show_default=False,
            ),
            repo_type=click.prompt("Project repo type", default=defaults.repo_type),
            repo_url=click.prompt("Project repo url", default="", show_default=False),
            license=click.prompt("Project license", default=defaults.license),
        )

    def confirm_overwrite(self, name: str) -> bool:
        click.echo(f"! {name} folder already exists!")
        return click.confirm(
            "Do you want to delete it and continue with the new project?",
            default=False,
        )
