"""Config commands -- view and modify global configuration.

Provides the ``specshift config`` sub-command group for reading,
updating, and resetting the user's global configuration file
(:class:`~specshift.models.GlobalConfig`). Settings are persisted in
the specshift config directory and supply defaults for the target
version, strict mode, validation, and output formats.
"""

from __future__ import annotations

import typer

from specshift.output import error, format_data, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False,
        "--effective",
        "-e",
        help="Show the resolved config (project file and environment applied).",
    ),
) -> None:
    """Show current configuration.

    Prints the config directory path followed by the stored global config,
    or with ``--effective`` the result of the full precedence chain.

    Example::

        specshift config show
        specshift --json config show --effective
    """
    from specshift.config import get_config_dir, load_global_config, resolve_config
    from specshift.exceptions import SpecshiftError

    try:
        config = resolve_config() if effective else load_global_config()
    except SpecshiftError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    format_data(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'output.document')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type, and ``target`` is normalised to a full version
    string. The updated config is validated against
    :class:`~specshift.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        specshift config set target 3.1
        specshift config set strict_downlevel true
        specshift config set output.document yaml
    """
    from specshift.config import load_global_config, save_global_config
    from specshift.exceptions import UnsupportedTargetError
    from specshift.export.target import parse_target
    from specshift.models import GlobalConfig

    config = load_global_config()
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
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes", "on")
    elif key == "target":
        try:
            coerced = parse_target(value).value
        except UnsupportedTargetError as exc:
            error(str(exc))
            raise typer.Exit(code=2) from None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
) -> None:
    """Reset configuration to defaults.

    Replaces the persisted global config with a fresh
    :class:`~specshift.models.GlobalConfig`. Asks for confirmation unless
    ``--force`` is active.

    Example::

        specshift config reset
        specshift --force config reset
    """
    from specshift.config import save_global_config
    from specshift.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
