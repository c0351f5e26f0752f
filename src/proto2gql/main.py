from __future__ import annotations

import argparse
import os
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence

from proto2gql.converter import protobuf_to_graphql
from proto2gql.errors import NoProtoFilesError, Proto2GqlError, UnsupportedSyntaxError
from proto2gql.parser.descriptor_loader import load_tree

PROTO_EXTENSION = ".proto"
GRAPHQL_EXTENSION = ".graphql"
HELP_WORDS = ("help",)


def find_proto_files(input_path: str, recursive: bool = False) -> List[str]:
    """Return the .proto files for a file or directory path, sorted."""
    path = Path(input_path)
    if not path.exists():
        raise FileNotFoundError(f"No such file or directory: '{input_path}'")
    if path.is_file():
        return [str(path)] if path.suffix == PROTO_EXTENSION else []

    candidates = path.rglob(f"*{PROTO_EXTENSION}") if recursive else path.glob(f"*{PROTO_EXTENSION}")
    return sorted(str(p) for p in candidates if p.is_file())


def write_schema(output_dir: str, proto_file: str, schema: str) -> str:
    """Write `<stem>.graphql` for a proto file and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    file_path = os.path.join(output_dir, Path(proto_file).stem + GRAPHQL_EXTENSION)
    Path(file_path).write_text(schema, encoding="utf-8")
    return file_path


def convert_file(proto_file: str, include_paths: Optional[Sequence[str]] = None) -> Optional[str]:
    """Convert one .proto file to SDL text, or None if it declares nothing."""
    root = load_tree(proto_file, include_paths)
    return protobuf_to_graphql(root)


def _convert_all(
    proto_files: List[str],
    include_paths: Optional[Sequence[str]],
    jobs: int,
) -> List[Optional[str]]:
    if jobs <= 1 or len(proto_files) == 1:
        return [convert_file(pf, include_paths) for pf in proto_files]

    with ThreadPoolExecutor(max_workers=jobs) as executor:
        futures = [executor.submit(convert_file, pf, include_paths) for pf in proto_files]
        try:
            return [f.result() for f in futures]
        except Exception:
            for f in futures:
                f.cancel()
            raise


def run(
    input_path: str,
    output_dir: str,
    recursive: bool = False,
    include_paths: Optional[Sequence[str]] = None,
    jobs: int = 1,
) -> List[str]:
    """Main pipeline: discover, convert, write.

    Every file is converted before anything is written, so an unsupported
    syntax anywhere leaves the output directory untouched.
    """
    # 1. Find input files
    proto_files = find_proto_files(input_path, recursive)
    if not proto_files:
        raise NoProtoFilesError(
            f"Could not find protobuf files in the provided path: '{os.path.abspath(input_path)}'."
        )

    print(f"Found {len(proto_files)} proto file(s)")

    # 2. Convert
    schemas = _convert_all(proto_files, include_paths, jobs)

    # 3. Write
    generated: List[str] = []
    for proto_file, schema in zip(proto_files, schemas):
        if schema is None:
            print(f"  Skipped {proto_file}: no declarations to convert", file=sys.stderr)
            continue
        file_path = write_schema(output_dir, proto_file, schema)
        generated.append(file_path)
        print(f"  Generated: {file_path}")

    print(
        f"Converted {len(generated)} protobuf{'s' if len(generated) != 1 else ''} "
        f"into GraphQL schemas at {output_dir}."
    )
    return generated


class _ArgumentParser(argparse.ArgumentParser):
    """argparse with exit status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="proto2gql",
        description="Convert proto3 schemas into GraphQL SDL. Currently only proto3 is supported.",
    )
    parser.add_argument("input", help="Path to a .proto file or a directory containing .proto files")
    parser.add_argument("output", help="Output directory for generated .graphql file(s)")
    parser.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="Search the input directory recursively",
    )
    parser.add_argument(
        "-I", "--proto-path",
        dest="include_paths",
        action="append",
        default=[],
        metavar="DIR",
        help="Additional directory to search for imports (may be repeated)",
    )
    parser.add_argument(
        "-j", "--jobs",
        type=int,
        default=1,
        help="Number of files to convert concurrently",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()

    if argv and argv[0] in HELP_WORDS:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)

    try:
        run(
            args.input,
            args.output,
            recursive=args.recursive,
            include_paths=args.include_paths,
            jobs=args.jobs,
        )
    except UnsupportedSyntaxError as e:
        print(e, file=sys.stderr)
        return 1
    except (NoProtoFilesError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Proto2GqlError as e:
        print(f"Error during conversion: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error during conversion: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
