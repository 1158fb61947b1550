# representation:
#  sign-magnitude. _sign is True for values >= 0, _digits is a normalized
#    mpn magnitude (32-bit digits in uint64 words, least significant first).
#  zero is always [0] with _sign True.
#  bitwise operators and >> work on a two's complement view of the
#    magnitude that mpn builds on the fly, with one extra sign digit.
#  in-place operators are the primitives and rebind _digits once the
#    result is complete; the plain operators run them on a new value that
#    shares the left operand's digits until that rebinding.

import logging
import numbers
import operator

import numpy as np

import mpn
from mpn import BitOp

logger = logging.getLogger(__name__)

DECIMAL_DIGITS = frozenset('0123456789')


class BigIntegerError(Exception):
    pass

class DivisionByZero(BigIntegerError, ZeroDivisionError):
    pass

class InvalidFormat(BigIntegerError, ValueError):
    pass

class UnsupportedShift(BigIntegerError, ValueError):
    pass


class BigInteger:
    '''Signed integer of unbounded magnitude.

    BigInteger(value=0, sign=None, *, xp=None) accepts another BigInteger
    (copied), a Python integer, decimal text with an optional sign, or a
    sequence of 32-bit digits, least significant first, together with a
    sign flag (True for non-negative).

    Division truncates toward zero and the remainder takes the sign of the
    dividend, so -7 // 2 == -3 and -7 % 2 == -1, unlike int.

    xp is the array namespace holding the digits; numpy unless given.
    '''
    def __init__(self, value=0, sign=None, *, xp=None):
        if isinstance(value, BigInteger):
            if sign is not None:
                raise TypeError('sign is only accepted with a digit sequence')
            if xp is None or xp is value.xp:
                self.xp = value.xp
                self._assign(mpn.copy(value._digits), value._sign)
            else:
                self.xp = xp
                self._assign(mpn.from_int(xp, mpn.to_int(value._digits)), value._sign)
            return
        xp = self.xp = np if xp is None else xp
        if isinstance(value, str):
            if sign is not None:
                raise TypeError('sign is only accepted with a digit sequence')
            self._assign(*_parse(xp, value))
        elif isinstance(value, numbers.Integral):
            if sign is not None:
                raise TypeError('sign is only accepted with a digit sequence')
            value = int(value)
            self._assign(mpn.from_int(xp, abs(value)), value >= 0)
        else:
            digits = [operator.index(digit) for digit in value]
            for digit in digits:
                if not 0 <= digit <= mpn.MAX_DIGIT:
                    raise ValueError(f'digit {digit} outside [0, {mpn.BASE})')
            self._assign(mpn.from_digits(xp, digits), True if sign is None else bool(sign))

    @classmethod
    def from_string(cls, text, *, xp=None):
        return cls(str(text), xp=xp)

    @classmethod
    def _from_parts(cls, digits, sign, xp):
        x = cls.__new__(cls)
        x.xp = xp
        return x._assign(digits, sign)

    def _assign(self, digits, sign):
        digits = mpn.normalize(digits)
        self._digits = digits
        self._sign = bool(sign) or mpn.is_zero(digits)
        return self

    @property
    def sign(self):
        return self._sign

    @property
    def digits(self):
        return mpn.copy(self._digits)

    def _coerce(x, y):
        if isinstance(y, BigInteger):
            return y if y.xp is x.xp else BigInteger(y, xp=x.xp)
        if isinstance(y, numbers.Integral):
            return BigInteger(y, xp=x.xp)
        return None

    def __iadd__(x, y):
        y = x._coerce(y)
        if y is None:
            return NotImplemented
        if x._sign != y._sign:
            return x.__isub__(-y)
        return x._assign(mpn.add(x._digits, y._digits), x._sign)

    def __isub__(x, y):
        y = x._coerce(y)
        if y is None:
            return NotImplemented
        if x._sign != y._sign:
            return x._assign(mpn.add(x._digits, y._digits), x._sign)
        if mpn.cmp(x._digits, y._digits) >= 0:
            return x._assign(mpn.sub(x._digits, y._digits), x._sign)
        # |x| < |y|: x - y == -(y - x)
        return x._assign(mpn.sub(y._digits, x._digits), not x._sign)

    def __imul__(x, y):
        y = x._coerce(y)
        if y is None:
            return NotImplemented
        return x._assign(mpn.mul(x._digits, y._digits), x._sign == y._sign)

    def _divmod(x, y):
        if mpn.is_zero(y._digits):
            raise DivisionByZero('division by zero')
        q, r = mpn.divrem(x._digits, y._digits)
        return (
            BigInteger._from_parts(q, x._sign == y._sign, x.xp),
            BigInteger._from_parts(r, x._sign, x.xp),
        )

    def __ifloordiv__(x, y):
        y = x._coerce(y)
        if y is None:
            return NotImplemented
        q, r = x._divmod(y)
        return x._assign(q._digits, q._sign)

    def __imod__(x, y):
        y = x._coerce(y)
        if y is None:
            return NotImplemented
        q, r = x._divmod(y)
        return x._assign(r._digits, r._sign)

    def __divmod__(x, y):
        y = x._coerce(y)
        if y is None:
            return NotImplemented
        return x._divmod(y)

    def __rdivmod__(x, y):
        y = x._coerce(y)
        if y is None:
            return NotImplemented
        return y._divmod(x)

    def _bitwise(x, y, op):
        y = x._coerce(y)
        if y is None:
            return NotImplemented
        digits, negative = mpn.bitwise(x._digits, not x._sign, y._digits, not y._sign, op)
        return x._assign(digits, not negative)

    def __iand__(x, y):
        return x._bitwise(y, BitOp.AND)

    def __ior__(x, y):
        return x._bitwise(y, BitOp.OR)

    def __ixor__(x, y):
        return x._bitwise(y, BitOp.XOR)

    def __ilshift__(x, count):
        count = _shift_count(count)
        if count is None:
            return NotImplemented
        return x._assign(mpn.lshift(x._digits, count), x._sign)

    def __irshift__(x, count):
        count = _shift_count(count)
        if count is None:
            return NotImplemented
        digits, negative = mpn.rshift(x._digits, not x._sign, count)
        return x._assign(digits, not negative)

    def __neg__(x):
        return BigInteger._from_parts(mpn.copy(x._digits), not x._sign, x.xp)

    def __pos__(x):
        return BigInteger(x)

    def __abs__(x):
        return BigInteger._from_parts(mpn.copy(x._digits), True, x.xp)

    def __invert__(x):
        return -x - 1

    def _cmp(x, y):
        if x._sign != y._sign:
            return 1 if x._sign else -1
        c = mpn.cmp(x._digits, y._digits)
        return c if x._sign else -c

    def __bool__(x):
        return not mpn.is_zero(x._digits)

    def __int__(x):
        value = mpn.to_int(x._digits)
        return value if x._sign else -value
    __index__ = __int__

    def __str__(x):
        return to_string(x)

    def __repr__(x):
        return f'BigInteger({to_string(x)!r})'


def _parse(xp, text):
    body = text[1:] if text[:1] in ('+', '-') else text
    if text and not body:
        raise InvalidFormat(f'no digits after sign in {text!r}')
    for ch in body:
        if ch not in DECIMAL_DIGITS:
            logger.debug('rejecting decimal literal %r', text)
            raise InvalidFormat(f'invalid character {ch!r} in decimal literal {text!r}')
    return mpn.from_decimal(xp, body), not text.startswith('-')

def _shift_count(count):
    try:
        count = operator.index(count)
    except TypeError:
        return None
    if count < 0:
        raise UnsupportedShift(f'negative shift count {count}')
    return count

def to_string(a):
    text = mpn.to_decimal(a._digits)
    return text if a._sign else '-' + text


def __BigIntegerOpBinary(iname):
    # the in-place op rebinds the digits it shares with x, kernels never write them
    def op(x, y):
        return getattr(BigInteger._from_parts(x._digits, x._sign, x.xp), iname)(y)
    return op
def __BigIntegerOpReflected(iname):
    def op(x, y):
        y = x._coerce(y)
        if y is None:
            return NotImplemented
        return getattr(BigInteger(y), iname)(x)
    return op
def __BigIntegerOpCompare(test):
    def op(x, y):
        y = x._coerce(y)
        if y is None:
            return NotImplemented
        return test(x._cmp(y), 0)
    return op
for opname in ['add', 'sub', 'mul', 'floordiv', 'mod', 'and', 'or', 'xor', 'lshift', 'rshift']:
    for name, factory in [
            [f'__{opname}__', __BigIntegerOpBinary],
            [f'__r{opname}__', __BigIntegerOpReflected],
    ]:
        op = factory(f'__i{opname}__')
        op.__name__ = name
        setattr(BigInteger, name, op)
for opname, test in [
        ['eq', operator.eq], ['ne', operator.ne],
        ['lt', operator.lt], ['le', operator.le],
        ['gt', operator.gt], ['ge', operator.ge],
]:
    op = __BigIntegerOpCompare(test)
    op.__name__ = f'__{opname}__'
    setattr(BigInteger, op.__name__, op)
# mutable, like the in-place operators make it
BigInteger.__hash__ = None


if __name__ == '__main__':
    rng = np.random.default_rng(0)

    def tdivmod(a, b):
        q = abs(a) // abs(b)
        if (a < 0) != (b < 0):
            q = -q
        return q, a - b * q

    for idx in range(64):
        ia = int(BigInteger(rng.integers(0, mpn.BASE, 6, dtype=np.uint64))) * int(rng.choice([-1, 1]))
        ib = int(BigInteger(rng.integers(0, mpn.BASE, 2, dtype=np.uint64))) * int(rng.choice([-1, 1]))
        a, b = BigInteger(ia), BigInteger(ib)
        assert int(a + b) == ia + ib
        assert int(a - b) == ia - ib
        assert int(a * b) == ia * ib
        assert tuple(map(int, divmod(a, b))) == tdivmod(ia, ib)
        assert int(a & b) == ia & ib and int(a | b) == ia | ib and int(a ^ b) == ia ^ ib
        assert int(a >> 37) == ia >> 37 and int(a << 37) == ia << 37
        assert BigInteger(str(a)) == a and str(a) == str(ia)

    simple = BigInteger('123456789012345678901234567890')
    simple += 1
    assert str(simple) == '123456789012345678901234567891'
    assert str(BigInteger('-0')) == '0'
