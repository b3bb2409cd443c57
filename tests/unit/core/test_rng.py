"""
Tests for ampute.core.rng

Verify RNG reproducibility, independence and substreams.
"""

import pytest
import torch
from ampute.core.rng import RNGState


class TestRNGReproducibility:
    """Same seed produces same results."""
    
    def test_rand_reproducible(self):
        rng1 = RNGState(seed=123)
        rng2 = RNGState(seed=123)
        
        assert torch.equal(rng1.rand(100), rng2.rand(100))
    
    def test_categorical_reproducible(self):
        probs = torch.tensor([0.2, 0.5, 0.3], dtype=torch.float64)
        x1 = RNGState(seed=789).categorical(probs, 200)
        x2 = RNGState(seed=789).categorical(probs, 200)
        
        assert torch.equal(x1, x2)


class TestRNGIndependence:
    """Different seeds produce different results."""
    
    def test_different_seeds_different_rand(self):
        x1 = RNGState(seed=1).rand(100)
        x2 = RNGState(seed=2).rand(100)
        
        assert not torch.allclose(x1, x2)


class TestRNGSpawn:
    """Child RNGs are independent but deterministic."""
    
    def test_spawn_deterministic(self):
        child1 = RNGState(seed=42).spawn()
        child2 = RNGState(seed=42).spawn()
        
        assert torch.equal(child1.rand(10), child2.rand(10))
    
    def test_spawn_independent_from_parent(self):
        rng = RNGState(seed=42)
        child = rng.spawn()
        
        assert not torch.allclose(rng.rand(100), child.rand(100))
    
    def test_spawn_seeds_disjoint_across_parent_seeds(self):
        # seed 0 and seed 1000003 must not hand out the same child streams
        a = RNGState(seed=0)
        b = RNGState(seed=1000003)
        seeds_a = {a.spawn().seed for _ in range(3)}
        seeds_b = {b.spawn().seed for _ in range(3)}
        assert not seeds_a & seeds_b
    
    def test_spawn_and_substream_seeds_differ(self):
        rng = RNGState(seed=42)
        assert rng.spawn().seed != rng.substream(1).seed
    
    def test_successive_spawns_distinct(self):
        rng = RNGState(seed=42)
        children = [rng.spawn() for _ in range(4)]
        seeds = {c.seed for c in children}
        assert len(seeds) == 4


class TestRNGSubstream:
    """Substreams depend only on (seed, index)."""
    
    def test_substream_deterministic(self):
        a = RNGState(seed=42).substream(3)
        b = RNGState(seed=42).substream(3)
        
        assert a.seed == b.seed
        assert torch.equal(a.rand(20), b.rand(20))
    
    def test_substream_unaffected_by_spawns(self):
        rng1 = RNGState(seed=42)
        rng2 = RNGState(seed=42)
        for _ in range(5):
            rng2.spawn()
        
        assert rng1.substream(0).seed == rng2.substream(0).seed
    
    def test_substream_order_independent(self):
        rng = RNGState(seed=9)
        forward = [rng.substream(i).rand(5) for i in range(4)]
        backward = [rng.substream(i).rand(5) for i in reversed(range(4))][::-1]
        
        for f, b in zip(forward, backward):
            assert torch.equal(f, b)
    
    def test_substreams_differ(self):
        rng = RNGState(seed=42)
        assert not torch.allclose(rng.substream(0).rand(50), rng.substream(1).rand(50))
    
    def test_substreams_differ_across_seeds(self):
        assert RNGState(seed=1).substream(0).seed != RNGState(seed=2).substream(0).seed
    
    def test_negative_index_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            RNGState(seed=42).substream(-1)


class TestRNGShapesAndDtypes:
    """Output shapes and dtypes are correct."""
    
    def test_rand_shape(self):
        x = RNGState(seed=42).rand(10, 20)
        assert x.shape == (10, 20)
    
    def test_rand_float64_default(self):
        x = RNGState(seed=42).rand(10)
        assert x.dtype == torch.float64
    
    def test_rand_float32(self):
        x = RNGState(seed=42).rand(10, dtype=torch.float32)
        assert x.dtype == torch.float32
    
    def test_categorical_range(self):
        probs = torch.tensor([0.0, 0.5, 0.5], dtype=torch.float64)
        x = RNGState(seed=42).categorical(probs, 1000)
        assert x.shape == (1000,)
        assert int(x.min()) >= 1
        assert int(x.max()) <= 2
