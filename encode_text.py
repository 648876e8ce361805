"""
Letter Huffman encoder

Reads a text file, counts a-z (case-folded, everything else ignored), builds
the Huffman code table and prints it followed by the encoded bitstream.

Optional outputs:
  - --packed FILE   bitstream packed into bytes (zero-padded at the end)
  - --outdir DIR    code_table.csv and code_lengths.png
  - --summary       code statistics after the bitstream

How to run:
  python encode_text.py input.txt
  python encode_text.py notes.txt --summary --outdir results --packed notes.huff
"""

from __future__ import annotations

import argparse
import csv
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from loguru import logger

import huffman as huff

FIXED_WIDTH_BITS = 5 # enough for 26 letters without compression
EMPTY_INPUT_MESSAGE = "No lowercase letters found in input. Nothing to encode."


# Input side

def read_input(path: Path) -> bytes:
    return Path(path).read_bytes()

def _fold(b: int) -> Optional[str]:
    # ASCII only: 'A'-'Z' -> 'a'-'z', anything else is not a letter
    if 65 <= b <= 90:
        b += 32
    if 97 <= b <= 122:
        return chr(b)
    return None

def letter_frequencies(data: bytes) -> Dict[str, int]:
    ft: Dict[str, int] = {symbol: 0 for symbol in huff.ALPHABET}
    for b in data:
        ch = _fold(b)
        if ch is not None:
            ft[ch] += 1
    return ft


# Output side

def encode_message(data: bytes, codes: Mapping[str, str]) -> str:
    """
    Concatenate the code of every letter in data.
    Non-letters and letters without a code are skipped.
    """
    parts: List[str] = []
    for b in data:
        ch = _fold(b)
        if ch is None:
            continue
        bits = codes.get(ch)
        if bits:
            parts.append(bits)
    return "".join(parts)


def pack_bits(bits: str) -> Tuple[bytes, int]:
    """
    Turn an encoded message (one '0'/'1' char per bit) into bytes, first bit in the high bit.
    The last byte is filled with zeros; pad_bits says how many, so len(bits) == 8 * len(packed) - pad_bits.
    """
    out = bytearray()
    acc = 0
    acc_bits = 0

    for ch in bits:
        acc = (acc << 1) | (1 if ch == '1' else 0)
        acc_bits += 1
        if acc_bits == 8:
            out.append(acc & 0xFF)
            acc = 0
            acc_bits = 0

    pad_bits = 0
    if acc_bits != 0:
        pad_bits = 8 - acc_bits
        acc = acc << pad_bits
        out.append(acc & 0xFF)

    return bytes(out), pad_bits


def format_code_table(codes: Mapping[str, str]) -> str:
    lines = ["Character : Code"]
    for symbol in sorted(codes):
        lines.append(f"{symbol} : {codes[symbol]}")
    return "\n".join(lines)


@dataclass
class CodeSummary:
    unique_symbols: int
    letter_count: int
    encoded_bits: int
    average_code_length: float
    fixed_width_bits: int
    compression_ratio: float  # encoded bits / 8 bits per input letter


def summarize(frequencies: Mapping[str, int], codes: Mapping[str, str]) -> CodeSummary:
    letter_count = sum(frequencies.get(s, 0) for s in codes)
    encoded_bits = sum(frequencies.get(s, 0) * len(code) for s, code in codes.items())
    return CodeSummary(
        unique_symbols=len(codes),
        letter_count=letter_count,
        encoded_bits=encoded_bits,
        average_code_length=encoded_bits / max(1, letter_count),
        fixed_width_bits=FIXED_WIDTH_BITS * letter_count,
        compression_ratio=encoded_bits / max(1, 8 * letter_count),
    )


def write_code_table_csv(path: Path, frequencies: Mapping[str, int], codes: Mapping[str, str]) -> None:
    fields = ["symbol", "frequency", "code", "code_length"]
    with Path(path).open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for symbol in sorted(codes):
            w.writerow({
                "symbol": symbol,
                "frequency": frequencies.get(symbol, 0),
                "code": codes[symbol],
                "code_length": len(codes[symbol]),
            })


def plot_code_lengths(frequencies: Mapping[str, int], codes: Mapping[str, str], outdir: Path) -> Path:
    symbols = sorted(codes)
    x = list(range(len(symbols)))
    out_path = Path(outdir) / "code_lengths.png"

    fig, ax_freq = plt.subplots()
    ax_freq.bar(x, [frequencies.get(s, 0) for s in symbols], color="tab:blue", alpha=0.6, label="frequency")
    ax_freq.set_ylabel("Frequency")
    ax_freq.set_xticks(x)
    ax_freq.set_xticklabels(symbols)

    ax_len = ax_freq.twinx()
    ax_len.plot(x, [len(codes[s]) for s in symbols], marker="o", color="tab:red", label="code length")
    ax_len.set_ylabel("Code Length (bits)")

    handles, labels = ax_freq.get_legend_handles_labels()
    len_handles, len_labels = ax_len.get_legend_handles_labels()
    ax_freq.legend(handles + len_handles, labels + len_labels, loc="upper right")

    ax_freq.set_title("Letter Frequency vs Huffman Code Length")
    fig.tight_layout()
    fig.savefig(out_path, dpi=200)
    plt.close(fig)
    return out_path


# Main

def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Huffman-encode the letters of a text file")
    ap.add_argument("input", nargs="?", default="input.txt", help="Text file to encode")
    ap.add_argument("--outdir", type=str, default=None, help="Write code_table.csv and code_lengths.png here")
    ap.add_argument("--packed", type=str, default=None, help="Write the bitstream packed into bytes to this file")
    ap.add_argument("--summary", action="store_true", help="Print code statistics after the bitstream")
    ap.add_argument("--verbose", action="store_true", help="Debug logging on stderr")
    args = ap.parse_args(argv)

    configure_logging(args.verbose)

    try:
        data = read_input(Path(args.input))
    except OSError as e:
        logger.error(f"[encode_text] cannot read {args.input}: {e}")
        print(f"Failed to open input file: {args.input}")
        return 1

    ft = letter_frequencies(data)
    codes = huff.build_code_table(ft)
    if not codes:
        print(EMPTY_INPUT_MESSAGE)
        return 0
    logger.info(f"[encode_text] {len(codes)} distinct letters in {len(data)} bytes")

    bits = encode_message(data, codes)

    print(format_code_table(codes))
    print()
    print("Encoded message:")
    print(bits)

    if args.summary:
        s = summarize(ft, codes)
        print()
        print(f"Distinct letters: {s.unique_symbols}")
        print(f"Letters encoded: {s.letter_count}")
        print(f"Encoded bits: {s.encoded_bits} (fixed {FIXED_WIDTH_BITS}-bit: {s.fixed_width_bits})")
        print(f"Average code length: {s.average_code_length:.3f} bits")
        print(f"Compression ratio vs 8-bit: {s.compression_ratio:.3f}")

    if args.packed:
        packed, pad_bits = pack_bits(bits)
        Path(args.packed).write_bytes(packed)
        logger.info(f"[encode_text] wrote {len(packed)} bytes ({pad_bits} pad bits) to {args.packed}")

    if args.outdir:
        outdir = Path(args.outdir)
        outdir.mkdir(parents=True, exist_ok=True)
        write_code_table_csv(outdir / "code_table.csv", ft, codes)
        chart = plot_code_lengths(ft, codes, outdir)
        logger.info(f"[encode_text] wrote code table and chart to {chart.parent.resolve()}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
