# NOTE: DIGITS are 32-bit values stored one per uint64 word of an array-api
# array, least significant first. The spare high half of each word holds
# carries until they are rippled into the next digit, so a digit*digit
# product plus two digits can be accumulated in place.
#
# Every function here takes magnitudes (no sign), never writes into its
# arguments, and returns a fresh normalized array unless stated otherwise.

import enum
import logging

logger = logging.getLogger(__name__)

WANT_ASSERT = True
DIGIT_BITS = 32
BASE = 1 << DIGIT_BITS
MAX_DIGIT = BASE - 1
DIGIT_MASK = MAX_DIGIT
SIGN_BIT = 1 << (DIGIT_BITS - 1)


class BitOp(enum.Enum):
    AND = '&'
    OR = '|'
    XOR = '^'

    def __call__(self, a, b):
        if self is BitOp.AND:
            return a & b
        elif self is BitOp.OR:
            return a | b
        else:
            return a ^ b


def size(a):
    return a.shape[-1]

def zeros(xp, n):
    return xp.zeros(n, dtype=xp.uint64)

def fill(xp, n, digit):
    return xp.full(n, digit, dtype=xp.uint64)

def copy(a):
    xp = a.__array_namespace__()
    return xp.asarray(a, copy=True)

def from_digits(xp, digits):
    # digits must already be known to lie in [0, BASE)
    return normalize(xp.asarray(digits, dtype=xp.uint64, copy=True))

def from_int(xp, value):
    assert value >= 0
    digits = []
    while True:
        digits.append(value & DIGIT_MASK)
        value >>= DIGIT_BITS
        if not value:
            break
    return from_digits(xp, digits)

def to_int(a):
    accum = 0
    for k in range(size(a) - 1, -1, -1):
        accum <<= DIGIT_BITS
        accum += int(a[k])
    return accum

def is_zero(a):
    return size(a) == 1 and int(a[0]) == 0

if WANT_ASSERT:
    def check_format(a):
        xp = a.__array_namespace__()
        assert len(a.shape) == 1 and size(a) >= 1, 'empty magnitude'
        assert size(a) == 1 or int(a[-1]) != 0, 'most significant digit is zero'
        assert not xp.any((a >> DIGIT_BITS) != 0), 'digit out of range'
else:
    def check_format(a):
        pass

def normalize(a):
    '''Strip most significant zero digits, keeping at least one.'''
    xp = a.__array_namespace__()
    nonzero, = xp.nonzero(a)
    if nonzero.shape[0] == 0:
        return zeros(xp, 1)
    a = a[:int(nonzero[-1]) + 1]
    check_format(a)
    return a

def extend(a, n, digit=0):
    xp = a.__array_namespace__()
    assert size(a) <= n
    out = fill(xp, n, digit)
    out[:size(a)] = a
    return out

def ripple(acc, wrap=False):
    '''Move everything above DIGIT_BITS in each word into the next word.

    Works in place on acc, which must be a scratch array. Unless wrap is
    set, the top word has to be left with room for the final carry;
    with wrap the carry out of the top word is dropped, which is
    arithmetic modulo BASE**size(acc).
    '''
    xp = acc.__array_namespace__()
    # a word below 2**64 carries less than BASE, so after two passes no word
    # exceeds BASE and what is left to carry is a single bit
    for idx in range(2):
        hi = acc >> DIGIT_BITS
        if not xp.any(hi != 0):
            return acc
        if WANT_ASSERT and not wrap:
            assert not xp.any(hi[-1:] != 0), 'carry out of the top digit'
        acc &= DIGIT_MASK
        acc[1:] += hi[:-1]
    generate = acc >> DIGIT_BITS
    if not xp.any(generate != 0):
        return acc
    # carry lookahead: a word of BASE generates a carry, a word of MAX_DIGIT
    # passes on whatever it receives, any other word absorbs it. the carry out
    # of each word is the generate bit of the last non-passing word at or below it.
    passing = acc == MAX_DIGIT
    deciding, = xp.nonzero(~passing)
    runs = xp.cumulative_sum(xp.astype(~passing, xp.int64))
    carry_out = xp.take(xp.concat([zeros(xp, 1), xp.take(generate, deciding)]), runs)
    if WANT_ASSERT and not wrap:
        assert not xp.any(carry_out[-1:] != 0), 'carry out of the top digit'
    acc[1:] += carry_out[:-1]
    acc &= DIGIT_MASK
    return acc

def cmp(a, b):
    '''-1, 0 or 1 as a is below, equal to or above b.'''
    if size(a) != size(b):
        return -1 if size(a) < size(b) else 1
    xp = a.__array_namespace__()
    differ, = xp.nonzero(a != b)
    if differ.shape[0] == 0:
        return 0
    top = int(differ[-1])
    return -1 if int(a[top]) < int(b[top]) else 1

def add(a, b):
    xp = a.__array_namespace__()
    acc = zeros(xp, max(size(a), size(b)) + 1)
    acc[:size(a)] += a
    acc[:size(b)] += b
    return normalize(ripple(acc))

def sub(a, b):
    '''a - b for a >= b.

    The borrow chain is run as a carry chain: a - b == ~(~a + b) over the
    width of a, and ~a + b cannot overflow that width when a >= b.
    '''
    if WANT_ASSERT:
        assert cmp(a, b) >= 0, 'subtrahend exceeds minuend'
    acc = a ^ DIGIT_MASK
    acc[:size(b)] += b
    ripple(acc)
    return normalize(acc ^ DIGIT_MASK)

def mul_1(a, digit):
    xp = a.__array_namespace__()
    acc = zeros(xp, size(a) + 1)
    acc[:size(a)] = a * digit
    return normalize(ripple(acc))

def mul(a, b):
    # schoolbook. each row adds at most (BASE-1)**2 onto a word below BASE,
    # which still fits the uint64 word, then the row's carries are rippled.
    xp = a.__array_namespace__()
    acc = zeros(xp, size(a) + size(b))
    for i in range(size(a)):
        digit = int(a[i])
        if digit == 0:
            continue
        acc[i:i + size(b)] += b * digit
        ripple(acc)
    return normalize(acc)

def divrem_1(a, digit):
    '''(quotient, remainder) of a by one nonzero digit; remainder is an int.'''
    xp = a.__array_namespace__()
    q = zeros(xp, size(a))
    carry = 0
    for k in range(size(a) - 1, -1, -1):
        q[k], carry = divmod((carry << DIGIT_BITS) | int(a[k]), digit)
    return normalize(q), carry

def divrem(a, b):
    '''(quotient, remainder) of a by b, b nonzero.

    Multi-digit divisors use Knuth's Algorithm D: both operands are scaled
    so the divisor's top digit is at least BASE/2, which keeps each
    quotient digit estimate at most 2 above the true digit.
    '''
    xp = a.__array_namespace__()
    if size(b) == 1:
        logger.debug('divided %d digits by a single digit', size(a))
        q, r = divrem_1(a, int(b[0]))
        return q, from_int(xp, r)

    f = BASE // (int(b[-1]) + 1)
    r = mul_1(a, f)
    d = mul_1(b, f)
    if cmp(r, d) < 0:
        return zeros(xp, 1), copy(a)

    n, m = size(r), size(d)
    top = int(d[-1])
    q = zeros(xp, n - m + 1)
    # window over the scaled dividend, starting with its top m-1 digits
    h = normalize(copy(r[n - m + 1:]))
    corrections = 0
    for k in range(n - m, -1, -1):
        h = normalize(xp.concat([r[k:k + 1], h]))
        estimate = int(h[-1])
        if size(h) > m:
            estimate = (estimate << DIGIT_BITS) | int(h[-2])
        qt = min(estimate // top, MAX_DIGIT)
        dq = mul_1(d, qt)
        while cmp(h, dq) < 0:
            qt -= 1
            dq = sub(dq, d)
            corrections += 1
        if WANT_ASSERT:
            assert corrections <= 2 * (n - m + 1 - k)
        q[k] = qt
        h = sub(h, dq)
    logger.debug('divided %d digits by %d with %d corrections', n, m, corrections)

    remainder, rest = divrem_1(h, f)
    if WANT_ASSERT:
        assert rest == 0, 'scaled remainder not a multiple of the scale'
    return normalize(q), remainder

def negate(t):
    '''Two's complement negation of the pattern t, modulo BASE**size(t).'''
    acc = t ^ DIGIT_MASK
    acc[0] += 1
    return ripple(acc, wrap=True)

def to_twos(a, negative, n):
    # n must exceed size(a) for the top digit to carry the sign
    t = extend(a, n)
    return negate(t) if negative else t

def from_twos(t):
    '''(magnitude, negative) of the two's complement pattern t.'''
    negative = bool(int(t[-1]) & SIGN_BIT)
    if negative:
        t = negate(t)
    return normalize(t), negative

def bitwise(a, a_negative, b, b_negative, op):
    # one digit beyond the longer operand is pure sign extension, so the
    # result's sign can be read from its top bit
    n = max(size(a), size(b)) + 1
    return from_twos(op(to_twos(a, a_negative, n), to_twos(b, b_negative, n)))

def lshift(a, count):
    xp = a.__array_namespace__()
    whole, bits = divmod(count, DIGIT_BITS)
    acc = zeros(xp, size(a) + whole + 1)
    acc[whole:whole + size(a)] = a
    # bits pushed over a digit boundary land in the high half of the word
    acc <<= bits
    return normalize(ripple(acc))

def rshift(a, negative, count):
    '''Arithmetic shift of (a, negative), rounding toward negative infinity.

    Returns (magnitude, negative) like from_twos.
    '''
    xp = a.__array_namespace__()
    whole, bits = divmod(count, DIGIT_BITS)
    t = to_twos(a, negative, size(a) + 1)
    sign_digit = MAX_DIGIT if negative else 0
    if whole >= size(t):
        return from_twos(fill(xp, 1, sign_digit))
    t = extend(t[whole:], size(t) - whole + 1, sign_digit)
    t = (t[:-1] >> bits) | ((t[1:] << (DIGIT_BITS - bits)) & DIGIT_MASK)
    return from_twos(t)

def to_decimal(a):
    chars = []
    while True:
        a, r = divrem_1(a, 10)
        chars.append('0123456789'[r])
        if is_zero(a):
            return ''.join(reversed(chars))

def from_decimal(xp, text):
    # text must be nothing but ascii digits
    acc = zeros(xp, 1)
    for ch in text:
        acc = add(mul_1(acc, 10), from_int(xp, ord(ch) - ord('0')))
    return acc


if __name__ == '__main__':
    import numpy as xp

    rng = xp.random.default_rng(0)
    for idx in range(64):
        a = from_digits(xp, rng.integers(0, BASE, 8, dtype=xp.uint64))
        b = from_digits(xp, rng.integers(0, BASE, 3, dtype=xp.uint64))
        ia, ib = to_int(a), to_int(b)
        assert to_int(add(a, b)) == ia + ib
        assert to_int(sub(a, b)) == ia - ib
        assert to_int(mul(a, b)) == ia * ib
        q, r = divrem(a, b)
        assert (to_int(q), to_int(r)) == divmod(ia, ib)
        assert to_decimal(a) == str(ia)
