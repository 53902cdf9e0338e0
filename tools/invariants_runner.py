#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Determinism and losslessness invariants (property tests) for the
# canonical Extended JSON writer.
#
# This runner:
# - generates random documents covering every BSON kind within limits
# - checks algebraic invariants against the emitted text
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, json, base64, random, struct
from typing import Any, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT, "implementations", "python"))

import bson
from bson.binary import Binary
from bson.code import Code
from bson.datetime_ms import DatetimeMS
from bson.decimal128 import Decimal128
from bson.int64 import Int64
from bson.max_key import MaxKey
from bson.min_key import MinKey
from bson.objectid import ObjectId
from bson.regex import Regex
from bson.timestamp import Timestamp

import extjson

SEED = int(os.environ.get("EXTJSON_SEED", "1337"))
TRIALS = int(os.environ.get("EXTJSON_TRIALS", "2000"))
MAX_GEN_DEPTH = int(os.environ.get("EXTJSON_GEN_MAX_DEPTH", "5"))
MAX_KEYS = int(os.environ.get("EXTJSON_GEN_MAX_KEYS", "6"))
MAX_LIST = int(os.environ.get("EXTJSON_GEN_MAX_LIST", "6"))
MAX_STR = int(os.environ.get("EXTJSON_GEN_MAX_STR", "24"))
MAX_BYTES = int(os.environ.get("EXTJSON_GEN_MAX_BYTES", "32"))

random.seed(SEED)

def rand_text() -> str:
    # Scalars only; control characters and quotes show up often on purpose.
    out = []
    for _ in range(random.randint(0, MAX_STR)):
        r = random.random()
        if r < 0.60:
            out.append(chr(random.randint(0x20, 0x7E)))
        elif r < 0.75:
            out.append(chr(random.randint(0x00, 0x1F)))
        elif r < 0.80:
            out.append(random.choice('"\\'))
        elif r < 0.95:
            out.append(chr(random.randint(0x00A0, 0xD7FF)))
        else:
            out.append(chr(random.randint(0x10000, 0x10FFFF)))
    return "".join(out)

def rand_code() -> str:
    # The BSON encoder rejects NUL wherever it writes a C string.
    return rand_text().replace("\x00", "")

def rand_bytes() -> bytes:
    return bytes(random.getrandbits(8) for _ in range(random.randint(0, MAX_BYTES)))

def rand_double() -> float:
    return struct.unpack("<d", struct.pack("<Q", random.getrandbits(64)))[0]

def gen_scalar() -> Any:
    kind = random.randrange(16)
    if kind == 0:
        return None
    if kind == 1:
        return random.random() < 0.5
    if kind == 2:
        return random.randint(-(2**31), 2**31 - 1)
    if kind == 3:
        return Int64(random.randint(-(2**63), 2**63 - 1))
    if kind == 4:
        return rand_double()
    if kind == 5:
        return Decimal128("{}E{}".format(random.randint(-10**12, 10**12), random.randint(-30, 30)))
    if kind == 6:
        return rand_text()
    if kind == 7:
        return ObjectId()
    if kind == 8:
        return Timestamp(random.getrandbits(32), random.getrandbits(32))
    if kind == 9:
        return Binary(rand_bytes(), random.choice([1, 2, 5, 6, 7, 0x80, 0xFF]))
    if kind == 10:
        return rand_bytes()
    if kind == 11:
        return Regex(rand_code(), "".join(sorted(random.sample("imsx", random.randint(0, 4)))))
    if kind == 12:
        return Code(rand_code())
    if kind == 13:
        return DatetimeMS(random.randint(-(2**62), 2**62))
    if kind == 14:
        return MinKey()
    return MaxKey()

def gen_value(depth: int) -> Any:
    if depth >= MAX_GEN_DEPTH:
        return gen_scalar()
    r = random.random()
    if r < 0.25:
        return gen_doc(depth + 1)
    if r < 0.40:
        return [gen_value(depth + 1) for _ in range(random.randint(0, MAX_LIST))]
    if r < 0.45:
        return Code(rand_code(), gen_doc(depth + 1))
    return gen_scalar()

def gen_doc(depth: int) -> Dict[str, Any]:
    keys = list(dict.fromkeys(rand_code() for _ in range(random.randint(0, MAX_KEYS))))
    return {k: gen_value(depth) for k in keys}

def fail(label: str, ctx: Any) -> None:
    print("INVARIANT FAIL:", label)
    print("CTX:", repr(ctx)[:2000])
    raise SystemExit(1)

def walk_tags(node: Any, out: Dict[str, list]) -> None:
    # Collect every tagged leaf of the parsed output.
    if isinstance(node, dict):
        for k, v in node.items():
            if k in ("$numberDouble", "$binary"):
                out.setdefault(k, []).append(v)
            walk_tags(v, out)
    elif isinstance(node, list):
        for v in node:
            walk_tags(v, out)

def main() -> int:
    for t in range(TRIALS):
        doc = gen_doc(0)

        # (1) Emission is deterministic
        a = extjson.dumps_bytes(doc)
        b = extjson.dumps_bytes(doc)
        if a != b:
            fail("emit stability", {"trial": t})

        # (2) Output is single-line valid JSON with field order kept
        text = a.decode("utf-8")
        if "\n" in text:
            fail("single line", {"trial": t, "text": text})
        parsed = json.loads(text)
        if list(parsed) != list(doc):
            fail("field order", {"trial": t})

        # (3) Finite doubles and binaries are lossless
        tags: Dict[str, list] = {}
        walk_tags(parsed, tags)
        for v in tags.get("$numberDouble", []):
            if v not in ("NaN", "Infinity", "-Infinity"):
                d = float(v)
                if repr(d) != v:
                    fail("double round-trip", {"trial": t, "text": v})
        for v in tags.get("$binary", []):
            raw = base64.b64decode(v["base64"], validate=True)
            if base64.b64encode(raw).decode("ascii") != v["base64"] or len(v["subType"]) != 2:
                fail("binary round-trip", {"trial": t, "value": v})

        # (4) Raw BSON path agrees with direct emission
        if extjson.bson_to_canonical(bson.encode(doc)) != text:
            fail("bson parity", {"trial": t})

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
