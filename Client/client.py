"""
GarageDash Client - Main Entry Point

This is the main entry point for the GarageDash command-line client.

Author: GarageDash Project
"""

import sys
import argparse


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all commands."""
    parser = argparse.ArgumentParser(
        description='GarageDash - browse and manage files in a Garage object store'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    ls_parser = subparsers.add_parser('ls', help='List a folder')
    ls_parser.add_argument('path', nargs='?', default='', help='Folder path (default: root)')
    ls_parser.add_argument('--trash', action='store_true', help='List the trash instead of the archive')

    get_parser = subparsers.add_parser('get', help='Download a file')
    get_parser.add_argument('path', help='Full path of the file')
    get_parser.add_argument('-o', '--output', help='Local destination (default: file name)')

    put_parser = subparsers.add_parser('put', help='Upload a file')
    put_parser.add_argument('local', help='Local file to upload')
    put_parser.add_argument('remote', help='Full destination path')
    put_parser.add_argument('--content-type', help='MIME type (default: guessed by the server)')

    save_parser = subparsers.add_parser('save', help='Replace a file with the text of a local file')
    save_parser.add_argument('local', help='Local UTF-8 text file')
    save_parser.add_argument('remote', help='Full destination path')

    rm_parser = subparsers.add_parser('rm', help='Move files to the trash')
    rm_parser.add_argument('paths', nargs='+', help='Full paths of the files')

    restore_parser = subparsers.add_parser('restore', help='Restore a file from the trash')
    restore_parser.add_argument('trash_key', help='Key of the file in the trash')

    purge_parser = subparsers.add_parser('purge', help='Permanently delete a file from the trash')
    purge_parser.add_argument('trash_key', help='Key of the file in the trash')

    pin_parser = subparsers.add_parser('pin', help='Pin or unpin a path')
    pin_parser.add_argument('path', help='File or folder path')

    nickname_parser = subparsers.add_parser('nickname', help='Set or clear a display name for a path')
    nickname_parser.add_argument('path', help='File or folder path')
    nickname_parser.add_argument('nickname', nargs='?', default=None, help='Display name (omit to clear)')

    watch_parser = subparsers.add_parser('watch', help='Poll a folder and print it when it changes')
    watch_parser.add_argument('path', nargs='?', default='', help='Folder path (default: root)')
    watch_parser.add_argument('--interval', type=float, help='Seconds between polls (default: from config)')
    watch_parser.add_argument('--count', type=int, help='Stop after this many polls')

    return parser


def main():
    """
    Main entry point for GarageDash client.

    Parses command-line arguments and runs the requested command.
    """
    args = build_parser().parse_args()

    from cli import run_cli_command
    return run_cli_command(args)


if __name__ == '__main__':
    sys.exit(main())
