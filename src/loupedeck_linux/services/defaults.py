"""Page layout written on first run."""

from loupedeck_linux.models import ComponentConfig, GridPosition, PageConfig, PageMeta, PagesConfig


def _at(col: int, row: int) -> GridPosition:
    return GridPosition(col=col, row=row)


def _launcher(col: int, row: int, label: str, command: str, bg: str, border: str) -> ComponentConfig:
    return ComponentConfig(
        type="button",
        position=_at(col, row),
        command=command,
        app_name=command,
        options={"label": label, "bgColor": bg, "borderColor": border},
    )


def default_pages_config() -> PagesConfig:
    """Page 1: clock, launchers, media and notifications; page 2: workspaces 1-10."""
    main = PageConfig(
        meta=PageMeta(title="Main", description="Clock, launchers and media controls"),
        components={
            "clock": ComponentConfig(type="clock", position=_at(0, 0)),
            "firefox": _launcher(1, 0, "Firefox", "firefox", "#FF6611", "#FF8833"),
            "password": _launcher(2, 0, "1Password", "1password", "#0094F5", "#33AAFF"),
            "mail": _launcher(3, 0, "Mail", "thunderbird", "#0A84FF", "#3399FF"),
            "playPause": ComponentConfig(type="mediaPlayPause", position=_at(4, 0)),
            "volume": ComponentConfig(type="volumeDisplay", position=_at(0, 0)),
            "media": ComponentConfig(type="mediaDisplay", position=_at(0, 1)),
            "notifications": ComponentConfig(type="notificationDisplay", position=_at(4, 2)),
            "button0": ComponentConfig(type="button", command="page:1", options={"label": "Main", "ledColor": "#FFFFFF"}),
            "button1": ComponentConfig(type="button", command="page:2", options={"label": "Workspaces", "ledColor": "#FF0000"}),
            "button2": ComponentConfig(type="button", options={"ledColor": "#00FF00"}),
            "button3": ComponentConfig(type="button", options={"ledColor": "#0000FF"}),
        },
    )

    workspaces: dict[str, ComponentConfig] = {
        "clock": ComponentConfig(type="clock", position=_at(0, 0), options={"showSeconds": False}),
    }
    for workspace_id in range(1, 11):
        row, col = (1, workspace_id - 1) if workspace_id <= 5 else (2, workspace_id - 6)
        workspaces[f"workspace{workspace_id}"] = ComponentConfig(
            type="workspace",
            position=_at(col, row),
            options={"workspaceId": workspace_id},
        )

    return PagesConfig(
        pages={
            "1": main,
            "2": PageConfig(meta=PageMeta(title="Workspaces", description="Hyprland workspaces 1-10"), components=workspaces),
        }
    )
