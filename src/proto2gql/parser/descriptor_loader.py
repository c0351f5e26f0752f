"""Build descriptor sets by running protoc from grpcio-tools."""

from __future__ import annotations

import os
import subprocess
import sys
import tempfile
from typing import List, Optional, Sequence

from google.protobuf import descriptor_pb2 as d2

from proto2gql.errors import ProtocError
from proto2gql.models import ProtoNamespace

from .descriptor_transform import build_tree


def _include_dirs(proto_files: Sequence[str], include_paths: Optional[Sequence[str]]) -> List[str]:
    """Explicit include paths first, then each file's own directory."""
    candidates = [os.path.abspath(p) for p in include_paths or []]
    candidates.extend(os.path.dirname(os.path.abspath(p)) for p in proto_files)

    seen = set()
    includes: List[str] = []
    for inc in candidates:
        if inc not in seen:
            seen.add(inc)
            includes.append(inc)
    return includes


def _virtual_name(proto_file: str, includes: Sequence[str]) -> str:
    """Name protoc gives a file: its path relative to the first include containing it."""
    path = os.path.abspath(proto_file)
    for inc in includes:
        if os.path.commonpath([inc, path]) == inc:
            return os.path.relpath(path, inc).replace(os.sep, "/")
    return os.path.basename(path)


def load_descriptor_set(
    proto_files: Sequence[str],
    include_paths: Optional[Sequence[str]] = None,
) -> d2.FileDescriptorSet:
    """Run protoc and return the FileDescriptorSet, imports and source info included.

    grpc_tools.protoc adds its bundled well-known type protos to the include path.
    """
    inc_args: List[str] = []
    for inc in _include_dirs(proto_files, include_paths):
        inc_args.extend(["-I", inc])

    with tempfile.TemporaryDirectory() as td:
        desc_path = os.path.join(td, "descriptor_set.pb")
        cmd = [
            sys.executable, "-m", "grpc_tools.protoc",
            "--include_imports",
            "--include_source_info",
            f"--descriptor_set_out={desc_path}",
        ] + inc_args + [os.path.abspath(p) for p in proto_files]
        try:
            subprocess.run(cmd, check=True, capture_output=True)
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode("utf-8", errors="ignore").strip()
            raise ProtocError(f"protoc failed: {stderr}") from e

        fds = d2.FileDescriptorSet()
        with open(desc_path, "rb") as f:
            fds.ParseFromString(f.read())

    return fds


def load_tree(proto_file: str, include_paths: Optional[Sequence[str]] = None) -> ProtoNamespace:
    """Parse one .proto file (and its imports) into a descriptor tree."""
    fds = load_descriptor_set([proto_file], include_paths)
    includes = _include_dirs([proto_file], include_paths)
    return build_tree(fds, target_files=[_virtual_name(proto_file, includes)])
