# hpckit

Small, self-contained numerical kernels and thread patterns, a sparse
preconditioned conjugate-gradient solver, and a command-line tool for an
IDEA-style 8-byte block cipher. Every piece runs on the CPU with NumPy,
SciPy and Python threads, and each has a command that runs it end to end.

## Installation

```
pip install hpckit
```

To run the tests:

```
pip install "hpckit[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `hpckit.crand` | `GlibcRandom` (`seed`, `rand`) and `RAND_MAX`: a bit-exact model of the C library's `srand`/`rand` sequence |
| `hpckit.idea` | `Action`, `inverse`, `encrypt_key`, `decrypt_key`, `transform_block`, `transform`, `read_userkey`, `run` |
| `hpckit.datagen` | `sample_data`, `generate_userkey`, `write_sample_data`, `write_userkey` |
| `hpckit.kernels` | `vecadd`, `simple_multiply`, `dgemm_trans`, `midpoint_pi`, `random_dense_matrix`, `sgemm`, `host_initial_data`, `add_then_multiply` |
| `hpckit.particles` | `Particles` with `generate`, `advance` and `kinetic_energy` |
| `hpckit.conv` | `convolve_ks5` (five-point convolution, two edge points each side left at zero) and `generate_signal` |
| `hpckit.simd` | `gather_pd` and `permute4x64_pd`, modelling the AVX2 gather and 64-bit lane permute on four doubles |
| `hpckit.transpose` | Tiled `copy_tiles`, `copy_shared`, `transpose_naive`, `transpose_coalesced`, `transpose_no_bank_conflicts`, `transpose_swizzling`, plus `reference_transpose`, `check_result`, `bandwidth_gbps` |
| `hpckit.pi` | `Strategy`, `partial_sum`, `pi_threads`, `pi_recursive` |
| `hpckit.primes` | `is_prime` and `count_primes` with a `"static"` or `"dynamic"` schedule |
| `hpckit.sparse` | `CsrMatrix` (`matvec`, `to_scipy`, `row`, `nrows`, `nnz`, `shape`), `laplace_matrix`, `incomplete_cholesky` |
| `hpckit.cg` | `preconditioned_cg`, returning a `CgResult` |
| `hpckit.demos` | `hello_threads`, `conflicts`, `master_region`, `single_region`, `sections_region`, `copy_private`, `taskwait_order`, `taskgroup_order` |

## Encrypting a file

Create a key and some sample input, then transform it:

```
hpckit-generate-userkey key.bin
hpckit-generate-data plain.bin 4096
hpckit-crypt encrypt plain.bin cipher.bin key.bin
hpckit-crypt decrypt cipher.bin roundtrip.bin key.bin
```

The key file must hold exactly eight little-endian signed 16-bit words
(16 bytes), and the input length must be a multiple of 8 bytes; otherwise
the command prints the problem and exits with status 1.
`hpckit-generate-userkey` always writes the key drawn from `rand()` seeded
with 3899; `hpckit-generate-data` requires a length divisible by 8.

From Python:

```python
from hpckit import datagen, idea

userkey = datagen.generate_userkey(3899)
plain = datagen.sample_data(64)
cipher = idea.transform(plain, idea.encrypt_key(userkey))
restored = idea.transform(cipher, idea.decrypt_key(userkey))
```

Multiplication in the rounds is taken modulo 65537 and then masked to 16
bits, with no special treatment of zero.

## Solving a sparse system

```python
import numpy as np
from hpckit.sparse import laplace_matrix, incomplete_cholesky
from hpckit.cg import preconditioned_cg

a = laplace_matrix(50, 0.04)
lower = incomplete_cholesky(a)
b = a.matvec(np.full(50 * 50, 0.75))
result = preconditioned_cg(a, lower, b, np.zeros(50 * 50), 1000, 1e-8)
print(result.converged, result.iterations, result.final_norm)
```

`incomplete_cholesky` raises `ValueError` on a structural or numerical zero
pivot. `hpckit-cg [grid]` builds the Laplacian (default grid 700), solves it
and prints the residual history.

## Other commands

| Command | Arguments |
| --- | --- |
| `hpckit-kernels` | `[homework\|sgemm\|openacc\|host]` (default `homework`) |
| `hpckit-particles` | `[count]` |
| `hpckit-conv` | `[points]`, more than 1000 |
| `hpckit-simd` | none |
| `hpckit-transpose` | `[size]`, a multiple of 32 |
| `hpckit-pi` | `[atomic\|critical\|false-share\|padded\|reduction\|task] [num_steps] [threads]` |
| `hpckit-primes` | `[static\|dynamic] [limit] [workers]` |
| `hpckit-cg` | `[grid]` |
| `hpckit-demos` | `<hello\|pthreads\|conflicts\|master\|single\|sections\|copyprivate\|taskwait\|taskgroup> [threads]` |

The defaults are large (for example 2^30 steps for `hpckit-pi` and a limit
of 50,000,000 for `hpckit-primes`); pass smaller values for a quick run.

## What this package does not do

Everything runs on the host. There is no GPU support: the transpose kernels
are modelled tile by tile on the CPU and their reported bandwidth is that of
the host run. There are no message-passing or two-process bandwidth
benchmarks, and no binding to an external BLAS library; matrix products use
NumPy. Thread demos run on Python threads, so CPU-bound work does not gain
parallel speed-up from them.