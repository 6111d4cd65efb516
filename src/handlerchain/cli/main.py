# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""handlerchain CLI — serve the demo application."""

from __future__ import annotations

from pathlib import Path

import click

from handlerchain.cli.console import console, print_banner
from handlerchain.core.config import Config


class HandlerChainCLI(click.Group):
    """Click group that shows the banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


@click.group(cls=HandlerChainCLI)
@click.version_option(package_name="handlerchain")
def cli() -> None:
    """handlerchain — Spring-style handler interceptors for Starlette."""


def load_config(config_path: Path | None, profiles: tuple[str, ...] = ()) -> Config:
    """Packaged defaults, overlaid with *config_path* when given."""
    if config_path is None:
        return Config.defaults()
    return Config.from_file(config_path, active_profiles=list(profiles))


@cli.command("run")
@click.option("--host", default=None, help="Bind address (default: from config).")
@click.option("--port", default=None, type=int, help="Port number (default: from config).")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML or TOML configuration file.",
)
@click.option("--profile", "profiles", multiple=True, help="Active profile overlay (repeatable).")
def run_command(
    host: str | None,
    port: int | None,
    config_path: Path | None,
    profiles: tuple[str, ...],
) -> None:
    """Start the demo application with uvicorn."""
    import uvicorn

    from handlerchain.demo.main import build_app

    config = load_config(config_path, profiles)
    if host is None:
        host = str(config.get("handlerchain.server.host", "127.0.0.1"))
    if port is None:
        port = int(config.get("handlerchain.server.port", 8080))

    print_banner()
    for source in config.loaded_sources:
        console.print(f"  [dim]config:[/dim] {source}", soft_wrap=True)
    console.print(f"  [info]Serving on http://{host}:{port}[/info]\n")

    uvicorn.run(build_app(config), host=host, port=port, log_config=None)
