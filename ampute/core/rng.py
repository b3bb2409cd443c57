"""
ampute.core.rng

RNG management - no global state.

Design Principles:
- Explicit RNG passing (no global seeds)
- Reproducible by construction
- Substreams keyed by block index for order-independent block evaluation
"""

from dataclasses import dataclass
import torch
import numpy as np

# Key tags keeping spawn() and substream() seeds in separate families
_SPAWN_KEY = 0
_SUBSTREAM_KEY = 1


def _derive_seed(seed: int, tag: int, index: int) -> int:
    """Child seed hashed from (seed, tag, index) with numpy's SeedSequence."""
    seq = np.random.SeedSequence([seed % (2**63), tag, index])
    return int(seq.generate_state(1, dtype=np.uint64)[0] % (2**63))


@dataclass
class RNGState:
    """Encapsulates RNG state for reproducibility.
    
    All randomness in ampute flows through RNGState instances.
    No global torch/numpy seeds should be set.
    
    Usage:
        rng = RNGState(seed=42)
        u = rng.rand(100)
        child_rng = rng.spawn()        # Independent sequential stream
        block_rng = rng.substream(3)   # Stream for row block 3
    """
    
    seed: int
    _generator: torch.Generator = None
    _spawn_counter: int = 0
    
    def __post_init__(self):
        if self._generator is None:
            self._generator = torch.Generator()
            self._generator.manual_seed(self.seed)
    
    def rand(self, *shape: int, dtype: torch.dtype = torch.float64) -> torch.Tensor:
        """Sample from uniform [0, 1) distribution."""
        return torch.rand(*shape, generator=self._generator, dtype=dtype)
    
    def categorical(self, probs: torch.Tensor, n: int) -> torch.Tensor:
        """Draw n independent category indices with the given probabilities."""
        return torch.multinomial(probs, n, replacement=True, generator=self._generator)
    
    def spawn(self) -> "RNGState":
        """Create independent child RNG.
        
        Each spawn gets a deterministic but different seed, hashed from
        (seed, spawn count). Children of different parent seeds do not
        share streams.
        """
        self._spawn_counter += 1
        return RNGState(seed=_derive_seed(self.seed, _SPAWN_KEY, self._spawn_counter))
    
    def substream(self, index: int) -> "RNGState":
        """Deterministic child stream for a block index.
        
        Unlike spawn(), the result depends only on (seed, index), never on
        how many streams were derived before. Blocks can therefore be
        evaluated in any order, or concurrently, with identical results.
        """
        if index < 0:
            raise ValueError(f"substream index must be non-negative, got {index}")
        return RNGState(seed=_derive_seed(self.seed, _SUBSTREAM_KEY, index))
