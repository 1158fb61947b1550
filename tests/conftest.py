import numpy as np
import pytest

import mpn


@pytest.fixture
def rng():
    return np.random.default_rng(0)

@pytest.fixture
def random_int(rng):
    '''Draws python ints of up to max_digits digits, biased toward the digit
    values that stress carries, borrows and the sign bit.'''
    special = [0, 1, mpn.SIGN_BIT, mpn.MAX_DIGIT]
    def draw(max_digits, signed=True, nonzero=False):
        while True:
            value = 0
            for idx in range(int(rng.integers(1, max_digits + 1))):
                if rng.integers(0, 2):
                    digit = special[int(rng.integers(0, len(special)))]
                else:
                    digit = int(rng.integers(0, mpn.BASE, dtype=np.uint64))
                value = (value << mpn.DIGIT_BITS) | digit
            if signed and rng.integers(0, 2):
                value = -value
            if value or not nonzero:
                return value
    return draw

@pytest.fixture
def tdivmod():
    '''divmod truncating toward zero, remainder signed like the dividend'''
    def tdivmod(a, b):
        q = abs(a) // abs(b)
        if (a < 0) != (b < 0):
            q = -q
        return q, a - b * q
    return tdivmod

@pytest.fixture(params=['numpy', 'array_api_strict'])
def xp(request):
    return pytest.importorskip(request.param)
