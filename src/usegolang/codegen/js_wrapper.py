"""
Runtime wrapper generation

The wrapper replaces the original module. It loads TinyGo's wasm_exec.js,
instantiates the slot's binary, starts the Go runtime and default-exports
the functions the Go program installed on globalThis.
"""

import json
import os
from pathlib import Path
from typing import Optional, Sequence, Union

from ..build_manager import WASM_FILENAME
from ..virtual_modules import WASM_EXEC_ID, artifact_url

_HEADER = """\
// Generated by use-golang from build slot {slot}. Do not edit.
import {glue};

const go = new Go();
"""

_INSTANTIATE = """\
const {{ instance }} = await WebAssembly.instantiateStreaming(
  fetch({wasm_url}),
  go.importObject
);
"""

# Without a declared export list, whatever the runtime put on globalThis
# while starting is what the module exports. The snapshot sits after the
# await so other modules instantiating meanwhile are not attributed here.
_DISCOVER_EXPORTS = _HEADER + _INSTANTIATE + """\
const before = new Set(Object.getOwnPropertyNames(globalThis));
go.run(instance);

const bindings = {{}};
for (const name of Object.getOwnPropertyNames(globalThis)) {{
  if (!before.has(name)) {{
    bindings[name] = globalThis[name];
  }}
}}

export default bindings;
"""

_DECLARED_EXPORTS = _HEADER + _INSTANTIATE + """\
go.run(instance);

const declared = {names};
const missing = declared.filter((name) => typeof globalThis[name] === "undefined");
if (missing.length > 0) {{
  throw new Error(
    "[use-golang] missing binding(s) " + missing.join(", ") +
    ": the Go program must install every //export function on globalThis"
  );
}}

const bindings = {{}};
for (const name of declared) {{
  bindings[name] = globalThis[name];
}}

export default bindings;
"""


def generate_js_wrapper(slot_id: str,
                        project_root: Union[str, Path],
                        exports: Optional[Sequence[str]] = None,
                        build_dir: Optional[Union[str, Path]] = None) -> str:
    """
    Render the replacement module for a compiled slot

    Args:
        slot_id: Build slot identifier
        project_root: Project root, used to show where the slot lives
        exports: Binding names to require at runtime; discovered when empty
        build_dir: Build root containing the slot

    Returns:
        JavaScript module source
    """
    if build_dir is not None:
        slot = Path(os.path.relpath(Path(build_dir) / slot_id, project_root)).as_posix()
    else:
        slot = slot_id

    values = {
        "slot": slot,
        "glue": json.dumps(WASM_EXEC_ID),
        "wasm_url": json.dumps(artifact_url(slot_id, WASM_FILENAME)),
    }

    if exports:
        return _DECLARED_EXPORTS.format(names=json.dumps(list(exports)), **values)
    return _DISCOVER_EXPORTS.format(**values)
