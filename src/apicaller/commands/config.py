"""Config commands -- view and modify the global configuration.

Provides the ``apicaller config`` sub-command group for reading, updating
and resetting the user's :class:`~apicaller.models.GlobalConfig`.
"""

from __future__ import annotations

import typer

from apicaller.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the stored configuration.

    Example::

        apicaller config show
        apicaller --json config show
    """
    from apicaller.config import get_config_dir, load_global_config
    from apicaller.exceptions import ConfigError

    try:
        config = load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g., 'cache.backend')."),
    value: str = typer.Argument(help="Value to set ('none' clears an optional field)."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the field it replaces and the
    result is validated against :class:`~apicaller.models.GlobalConfig`
    before saving.

    Example::

        apicaller config set base_url https://api.example.com/v1
        apicaller config set cache.backend disk
        apicaller config set cache.max_entries 100
    """
    from pydantic import ValidationError

    from apicaller.config import load_global_config, save_global_config
    from apicaller.exceptions import ConfigError
    from apicaller.models import GlobalConfig

    try:
        config = load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif value.lower() == "none":
        coerced = None
    else:
        # Pydantic coerces numeric strings for int/float fields.
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the configuration to defaults.

    Example::

        apicaller config reset --force
    """
    from apicaller.config import save_global_config
    from apicaller.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
