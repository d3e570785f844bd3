"""
Content for the generated project files.
"""

import textwrap
from typing import Any, Dict

import yaml

from ..models.project import ProjectConfig


MANIFEST_FILE = "package.json"
APP_MANIFEST_FILE = "app.yaml"


def build_manifest(config: ProjectConfig, version: str, scripts: Dict[str, str],
                   dependencies: Dict[str, str], dev_dependencies: Dict[str, str]) -> Dict[str, Any]:
    """package.json contents. Regenerated on every run."""
    author: Dict[str, Any] = {"email": config.contact_email}
    if config.vendor:
        author["name"] = config.vendor
    if config.support_url:
        author["url"] = config.support_url

    manifest: Dict[str, Any] = {
        "name": config.project_id,
        "version": version,
        "private": True,
        "description": f"{config.project_name} integration",
        "author": author,
        "main": "dist/index.js",
        "scripts": dict(scripts),
        "dependencies": dict(sorted(dependencies.items())),
        "devDependencies": dict(sorted(dev_dependencies.items())),
    }
    if config.support_url:
        manifest["bugs"] = {"url": config.support_url}
    return manifest


def app_manifest(config: ProjectConfig, version: str) -> str:
    data = {
        "app": {
            "id": config.project_id,
            "name": config.project_name,
            "version": version,
            "vendor": config.vendor or "",
            "contact": {
                "email": config.contact_email,
                "support_url": config.support_url or "",
            },
        },
        "runtime": {
            "entrypoint": "dist/index.js",
            "handlers": [
                {"name": "example", "path": "dist/handlers/example.js"},
            ],
        },
        "assets": {"icon": "assets/icon.svg"},
    }
    return yaml.dump(data, default_flow_style=False, sort_keys=False)


TSCONFIG = textwrap.dedent("""\
    {
      "compilerOptions": {
        "target": "ES2020",
        "module": "commonjs",
        "outDir": "dist",
        "rootDir": "src",
        "strict": true,
        "esModuleInterop": true,
        "skipLibCheck": true
      },
      "include": ["src"]
    }
    """)


INDEX_TS = textwrap.dedent("""\
    import { handleExample } from "./handlers/example";

    export const handlers = {
      example: handleExample,
    };
    """)


EXAMPLE_HANDLER_TS = textwrap.dedent("""\
    export interface ExampleEvent {
      payload: Record<string, unknown>;
    }

    export async function handleExample(event: ExampleEvent): Promise<Record<string, unknown>> {
      return { received: event.payload };
    }
    """)


ICON_SVG = textwrap.dedent("""\
    <svg xmlns="http://www.w3.org/2000/svg" width="64" height="64" viewBox="0 0 64 64">
      <rect width="64" height="64" rx="12" fill="#3b82f6"/>
    </svg>
    """)


GITIGNORE = textwrap.dedent("""\
    node_modules/
    dist/
    .env
    *.log
    """)


def readme(config: ProjectConfig, install_command: str, build_command: str, validate_command: str) -> str:
    lines = [
        f"# {config.project_name}",
        "",
        f"Integration app `{config.project_id}`.",
        "",
        "## Development",
        "",
        "```",
        install_command,
        build_command,
        validate_command,
        "```",
        "",
        f"Contact: {config.contact_email}",
    ]
    if config.support_url:
        lines.append(f"Support: {config.support_url}")
    return "\n".join(lines) + "\n"


def stub_files(config: ProjectConfig, version: str, install_command: str,
               build_command: str, validate_command: str) -> Dict[str, str]:
    """Project-relative path to content for every create-if-absent file."""
    return {
        APP_MANIFEST_FILE: app_manifest(config, version),
        "tsconfig.json": TSCONFIG,
        "src/index.ts": INDEX_TS,
        "src/handlers/example.ts": EXAMPLE_HANDLER_TS,
        "assets/icon.svg": ICON_SVG,
        "README.md": readme(config, install_command, build_command, validate_command),
        ".gitignore": GITIGNORE,
    }
