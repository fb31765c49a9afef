# lasforge

Building blocks for LAS/LAZ point clouds, written in pure Python with no
runtime dependencies. The package provides an adaptive range coder with
predictive integer coding. It reads and writes LAS variable-length records
and includes the small utilities an octree indexer needs.

## Modules

- `lasforge.models` holds the adaptive entropy models. `SymbolModel` covers
  an alphabet of 2 to 2048 symbols and `BitModel` covers single bits.
- `lasforge.encoder` and `lasforge.decoder` provide `ArithmeticEncoder` and
  `ArithmeticDecoder`, a 32-bit range coder.
  - The coder handles modelled bits and symbols through `encode_bit`,
    `encode_symbol`, `decode_bit` and `decode_symbol`.
  - It also handles raw bits, bytes, shorts, ints, int64s, floats and
    doubles through the `write_*` and `read_*` methods.
  - The encoder writes to a `bytearray`, to any object with `write()`, or to
    an internal buffer. `done()` flushes it.
- `lasforge.compressor` and `lasforge.decompressor` provide
  `IntegerCompressor` and `IntegerDecompressor`. They code integers as
  corrections to a prediction, with one or more contexts. Call `init()`
  before use.
- `lasforge.binio` provides `LeExtractor` and `LeInserter`. These are
  little-endian readers and writers over byte buffers. Fixed-size string
  fields are NUL-padded.
- `lasforge.vlr` covers LAS variable-length records. Each record can be
  built from bytes, read from a binary stream, serialised with `data()` or
  `write()`, and describe itself with a `header()` (54 bytes) or an
  `eheader()` (60 bytes).
  - `VlrHeader` and `EvlrHeader` are the record headers.
  - `VlrIndexRecord` records where a payload sits in a file.
  - `LazVlr` is the LASzip record. Its `for_format` builds the record for
    point formats 0–3 and 6–8.
  - `EbVlr` and `EbField` describe extra-bytes dimensions.
  - `WktVlr` holds a coordinate system.
  - `CopcInfoVlr` holds COPC info.
- `lasforge.bitutils` provides:
  - `clear_bit` and `clamp`;
  - bit reinterpretation with `u2d`, `i2d`, `d2u` and `d2i`;
  - little-endian `pack`/`unpack` by kind: `"u8"`, `"i16"`, `"u32"`,
    `"f64"` and so on;
  - `byte_sum` and `Summer`, a resetting checksum and counter;
  - `StreamingMedian`, a running median over a five-value window.
- `lasforge.keys` provides `GridKey`, which packs cell indices below 255
  per axis, and `VoxelKey`. A `VoxelKey` is an octree key with `child()`,
  `parent()` and string form `level-x-y-z`.
- `lasforge.las` provides the `Dimension` enum. `pdrf_dims(pdrf)` and
  `extent_dims(pdrf)` list the dimensions of each point data record format.
- `lasforge.common` provides:
  - `Options`, the settings of a processing run;
  - `FatalError`;
  - `FileDimInfo`, which has the text form `"<name> <type> <offset>"` and
    is read back with `FileDimInfo.parse`;
  - `Point`, a view whose first three doubles are X, Y and Z.
- `lasforge.progress` provides `ProgressWriter`. It writes framed
  little-endian progress messages (id 1000) and error messages (id 1001) to
  a file descriptor. With no descriptor, errors go to standard error.
- `lasforge.threadpool` provides `ThreadPool`, a worker pool with an
  optionally bounded queue. It has `wait_idle()`, `cycle()` and `resize()`,
  can trap task exceptions, and works as a context manager that joins on
  exit.
- `lasforge.mapfile` provides `map_file` and `unmap_file`. They map a region
  of a file read-only. The returned `MapContext` gives the bytes via
  `data()` and can be used in a `with` block.

## Example: round-tripping integers

```python
from lasforge.encoder import ArithmeticEncoder
from lasforge.decoder import ArithmeticDecoder
from lasforge.compressor import IntegerCompressor
from lasforge.decompressor import IntegerDecompressor

out = bytearray()
enc = ArithmeticEncoder(out, True)
comp = IntegerCompressor(32, 1)
comp.init()
values = [10, 12, 9, 1000, -5]
prev = 0
for v in values:
    comp.compress(enc, prev, v, 0)
    prev = v
enc.done()

dec = ArithmeticDecoder(bytes(out))
dec.read_init_bytes()
decomp = IntegerDecompressor(32, 1, 8, 0)
decomp.init()
prev = 0
decoded = []
for _ in values:
    prev = decomp.decompress(dec, prev, 0)
    decoded.append(prev)

assert decoded == values
```

## Example: a LASzip VLR

```python
from lasforge.vlr import LazVlr

vlr = LazVlr.for_format(3, 0, 50000)
raw = vlr.data()
again = LazVlr.from_bytes(raw)
assert again.items == vlr.items
```

## What it does not do

The package does not include:

- a LAS/LAZ file reader or writer;
- coders for whole point records;
- a command-line program or pipeline that builds an octree index from point
  cloud files.

It provides the pieces listed above, and assembling them into such tools is
left to the caller.

## Running the tests

```
pip install -e .[test]
pytest
```