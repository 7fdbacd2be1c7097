# Copyright 2025 Roger Cibrian
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

"""Command-line interface for deployctl.

This module provides the main CLI entry point for the deployctl tool.

Commands:

    upload: Upload an artifact to the deployment-management service

Example:
    Upload an artifact:
        ```bash
        $ deployctl upload build/app-2.4.artifact \
            --server https://deploy.example.com --description "release 2.4"
        ```

    Upload without progress bars (e.g. in CI logs):
        ```bash
        $ deployctl upload build/app-2.4.artifact --no-progress
        ```

    Show request/response dumps:
        ```bash
        $ deployctl upload build/app-2.4.artifact --verbose
        ```

Exit Codes:

- 0: Success
- 1: Error (configuration, authentication, file or upload failure)

Note:
    The CLI uses argparse for command parsing. Each command has its own
    handler function (cmd_<command>). Verbose mode shows full tracebacks
    on errors for debugging. Debug mode implies verbose mode and also
    shows the effective settings.
"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import sys

from deployctl import __version__
from deployctl.config import load_settings
from deployctl.deployments import UploadClient
from deployctl.exceptions import ConfigError, DeployCtlError
from deployctl.logging import get_logger, set_global_logger


def _package_version() -> str:
    try:
        return version("deployctl")
    except PackageNotFoundError:
        return __version__


def cmd_upload(args: argparse.Namespace) -> int:
    """Handler for 'deployctl upload' command.

    Loads settings (file, environment, flags), reads the bearer token,
    buffers the artifact into a multipart body and posts it to the
    deployment service.

    Args:
        args: Parsed command-line arguments containing the artifact path,
            description, connection flags and verbosity flags.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    # Configure global logger
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    artifact_path = Path(args.artifact).expanduser()

    try:
        settings = load_settings(
            args.config,
            overrides={
                "server": args.server,
                "skip_verify": True if args.skip_verify else None,
                "token_file": args.token,
                "timeout": args.timeout,
            },
        )
        if not settings.server:
            raise ConfigError(
                "no server configured; pass --server or set DEPLOYCTL_SERVER"
            )

        print(f"Uploading artifact: {artifact_path}")
        print(f"Server: {settings.server}")
        if settings.skip_verify:
            print("TLS certificate verification: disabled")
        print()

        with UploadClient(
            settings.server,
            skip_verify=settings.skip_verify,
            timeout=settings.timeout,
        ) as client:
            result = client.upload_artifact(
                args.description,
                artifact_path,
                settings.token_path,
                no_progress=args.no_progress,
            )
    except DeployCtlError as err:
        print(f"Error: {err}")
        if args.verbose or args.debug:
            import traceback

            traceback.print_exc()
        return 1

    # Display results
    print("=" * 70)
    print("UPLOAD RESULTS")
    print("=" * 70)
    print(f"Artifact:        {result.artifact_name}")
    print(f"Size:            {result.artifact_size} bytes")
    print(f"Request Size:    {result.body_size} bytes")
    print(f"Upload URL:      {result.upload_url}")
    print(f"Status:          {result.status_code}")
    print("=" * 70)
    print()
    print("[SUCCESS] Artifact uploaded successfully!")

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all sub-commands registered."""
    parser = argparse.ArgumentParser(
        prog="deployctl",
        description="deployctl - upload artifacts to a deployment-management service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"deployctl {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'upload' command
    parser_upload = subparsers.add_parser(
        "upload",
        help="Upload an artifact to the deployment service",
        description="Buffer an artifact into a multipart request and POST it to the deployment service.",
    )
    parser_upload.add_argument(
        "artifact",
        help="Path to the artifact file",
    )
    parser_upload.add_argument(
        "--description",
        default="",
        help="Artifact description (default: empty)",
    )
    parser_upload.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not show progress bars",
    )
    parser_upload.add_argument(
        "--server",
        default=None,
        help="Base URL of the deployment service (default: from settings)",
    )
    parser_upload.add_argument(
        "-k",
        "--skip-verify",
        action="store_true",
        help="Skip TLS certificate verification",
    )
    parser_upload.add_argument(
        "--token",
        default=None,
        help="Path to the token file written by login (default: ~/.cache/deployctl/authtoken)",
    )
    parser_upload.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: ./.deployctl.yaml or ~/.config/deployctl/config.yaml)",
    )
    parser_upload.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default: wait indefinitely)",
    )
    parser_upload.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show request and response dumps",
    )
    parser_upload.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser_upload.set_defaults(func=cmd_upload)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the deployctl CLI.

    This function is registered as the 'deployctl' console script in pyproject.toml.
    """
    parser = build_parser()

    # Parse and dispatch
    args = parser.parse_args(argv)

    # Call the appropriate command handler
    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
