"""Stand-in for glslx_bridge.js speaking the same line protocol.

Marker words in compiled contents trigger failure modes:
``CRASH`` exits, ``HANG`` never answers, ``GARBAGE`` answers non-JSON.
``SLOW`` delays tooltips on that result.
"""

import json
import os
import sys
import time

results = {}


def plain_range(name, line, column, length):
    return {
        "source": name,
        "start": {"line": line, "column": column},
        "end": {"line": line, "column": column + length},
    }


def handle(request):
    op = request["op"]
    if op == "compile":
        contents = request["contents"]
        if "CRASH" in contents:
            sys.exit(3)
        if "HANG" in contents:
            time.sleep(60)
        if "GARBAGE" in contents:
            return "GARBAGE"
        if "REJECT" in contents:
            raise ValueError("compiler rejected the source")
        results[request["handle"]] = request
        diagnostics = [
            {
                "kind": "error",
                "range": plain_range(request["name"], 0, contents.index("ERROR"), 5),
                "text": "unexpected ERROR",
            }
        ] if "ERROR" in contents else []
        return {
            "diagnostics": diagnostics,
            "unusedSymbols": [],
            "module": os.environ.get("GLSLX_MODULE"),
            "includes": request["includes"],
        }
    if op == "release":
        for h in request["handles"]:
            results.pop(h, None)
        return None
    if op == "format":
        return request["options"]["indent"] + request["text"].strip() + "\n"

    if request["handle"] not in results:
        raise KeyError("unknown compile handle " + request["handle"])
    name = request["name"]
    if op == "tooltip":
        if "SLOW" in results[request["handle"]]["contents"]:
            time.sleep(0.3)
        return {
            "tooltip": "float x",
            "range": plain_range(name, request["line"], request["column"], 1),
            "documentation": "x docs",
        }
    if op == "definition":
        return plain_range(name, 0, 0, 1)
    if op == "rename":
        return [plain_range(name, 0, 0, 1), plain_range(name, 1, 0, 1)]
    if op == "completion":
        return [{"kind": "function", "name": "mix", "detail": "vec4 mix()"}]
    if op == "signature":
        return {
            "activeSignature": 0,
            "activeArgument": 1,
            "signatures": [{"text": "vec4 mix(vec4 x, vec4 y)", "arguments": ["vec4 x", "vec4 y"]}],
        }
    if op == "symbols":
        return [{"kind": "function", "name": "main", "range": plain_range(name, 0, 5, 4)}]
    raise ValueError("unknown op " + op)


for line in sys.stdin:
    request = json.loads(line)
    try:
        value = handle(request)
    except (KeyError, ValueError) as e:
        reply = json.dumps({"id": request["id"], "ok": False, "error": str(e)})
    else:
        if value == "GARBAGE":
            reply = "this is not json"
        else:
            reply = json.dumps({"id": request["id"], "ok": True, "value": value})
    sys.stdout.write(reply + "\n")
    sys.stdout.flush()
