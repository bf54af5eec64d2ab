#
# A fixed-width decimal type packed into a single unsigned word: a sign bit, a biased
# exponent field and a significand field holding decimal digits as an unsigned integer.
#

import copy
import re
import sys
import threading
from collections import namedtuple
from enum import IntEnum, IntFlag
from typing import NamedTuple

import attr

__all__ = ('Context', 'DefaultContext', 'get_context', 'set_context', 'local_context',
           'DefaultTextFormat', 'TextFormat', 'Flags', 'HandlerKind',
           'DecimalFormat', 'PackedDecimal', 'DecimalTuple',
           'DecimalError', 'Truncated', 'ExponentWrapped', 'Unaligned',
           'OP_FROM_PARTS', 'OP_FROM_INT', 'OP_FROM_STRING', 'OP_CONVERT',
           'OP_ADD', 'OP_SUBTRACT',
           'Decimal32', 'Decimal64')


# Operation names
OP_FROM_PARTS = 'from_parts'
OP_FROM_INT = 'from_int'
OP_FROM_STRING = 'from_string'
OP_CONVERT = 'convert'
OP_ADD = 'add'
OP_SUBTRACT = 'subtract'


# Operation status flags.
class Flags(IntFlag):
    TRUNCATED        = 0x01
    EXPONENT_WRAPPED = 0x02
    UNALIGNED        = 0x04


DecimalTuple = namedtuple('DecimalTuple', 'sign exponent significand')


@attr.s(slots=True, kw_only=True, eq=False)
class TextFormat:
    '''Controls the output of conversion to decimal strings.'''

    # If True, numbers with a clear sign bit are preceded with a '+'.
    force_leading_sign = attr.ib(default=False)
    # If True, display a decimal point followed by a zero even though none is needed.  For
    # example, "5" and "150" would display as "5.0" and "150.0".
    force_point = attr.ib(default=True)
    # If True, trailing insignificant zeroes of the significand are stripped.  The value
    # output is unchanged; "15.0" stored as 150 * 10^-1 prints as 15 * 10^0 would.
    rstrip_zeroes = attr.ib(default=False)

    def leading_sign(self, sign):
        '''Return the leading sign string.'''
        return '-' if sign else '+' if self.force_leading_sign else ''

    def format_decimal(self, sign, exponent, digits):
        '''sign is True if the number has a negative sign.  digits is a string of significant
        digits.  exponent is the exponent of the leading digit, i.e. the decimal point
        appears exponent + 1 digits after the leading digit.
        '''
        if self.rstrip_zeroes:
            digits = digits.rstrip('0') or '0'

        parts = [self.leading_sign(sign)]
        point = exponent + 1
        if point <= 0:
            parts.extend(('0.', '0' * -point, digits))
        else:
            if point > len(digits):
                digits += (point - len(digits)) * '0'
            if point < len(digits):
                parts.extend((digits[:point], '.', digits[point:]))
            elif self.force_point:
                parts.extend((digits, '.0'))
            else:
                parts.append(digits)

        return ''.join(parts)

    def format_value(self, value):
        '''Return the packed value formatted as a plain decimal string.'''
        sign, exponent, significand = value.as_tuple()
        # Zero prints the same whatever its exponent
        if significand == 0:
            return self.format_decimal(sign, 0, '0')
        digits = str(significand)
        return self.format_decimal(sign, exponent + len(digits) - 1, digits)


# Default format for decimal output
DefaultTextFormat = TextFormat()


#
# Signals
#

class DecimalError(ArithmeticError):
    '''All arithmetic exceptions signalled by this module subclass from this.

    DecimalError expects two arguments:

         def __init__(self, op_tuple, result):

    op_tuple is a tuple of the operation name and operands causing the signal.  result is
    the value that default exception handling should deliver.

    None of these are errors in the default context; they record where precision or
    meaning was lost so that callers wanting stricter behaviour can ask for it.
    '''

    flag_to_raise = 'Nope! Fix your bug.'

    @property
    def op_tuple(self):
        return self.args[0]

    @property
    def default_result(self):
        return self.args[1]

    def signal(self, context=None):
        '''Call to signal an exception.  This routine handles the exception according to
        default or alternative exception handling as specified in the context.'''
        context = context or get_context()
        kind, handler = context.handler(self.__class__)
        result = self.default_result

        if kind != HandlerKind.NO_FLAG:
            context.flags |= self.flag_to_raise
            if kind == HandlerKind.RECORD_EXCEPTION:
                context.exceptions.append(self)

        if kind == HandlerKind.RAISE:
            raise self
        if kind == HandlerKind.SUBSTITUTE_VALUE:
            result = handler(self, context)

        return result


class Truncated(DecimalError):
    '''Signalled when significant digits are lost: a magnitude wider than the significand
    mask, or digits a string could not fold into the significand.  The default result
    keeps only what fits.'''

    flag_to_raise = Flags.TRUNCATED


class ExponentWrapped(DecimalError):
    '''Signalled when an exponent lies outside the range of the exponent field.  The
    default result stores it modulo the field width.'''

    flag_to_raise = Flags.EXPONENT_WRAPPED


class Unaligned(DecimalError):
    '''Signalled when adding or subtracting non-zero operands whose exponents differ.  No
    alignment is performed; the default result is the left hand operand unchanged.'''

    flag_to_raise = Flags.UNALIGNED


# Alternate exception handling

class HandlerKind(IntEnum):
    '''Indicates how a signalled exception should be handled.'''
    # Deliver the default result and raise the associated flag
    DEFAULT = 0

    # Deliver the default result without raising the associated flag
    NO_FLAG = 1

    # Default handling, and also append the exception to the context's exceptions list
    RECORD_EXCEPTION = 2

    # Raise the flag but substitute a value for the default result.  A handler must be
    # provided with signature
    #
    #    def handler(exception, context):
    #
    # The value returned by the handler will become the operation's result.
    SUBSTITUTE_VALUE = 3

    # Raise the exception immediately
    RAISE = 4

    def requires_handler(self):
        return self == HandlerKind.SUBSTITUTE_VALUE


class Context:
    '''The execution context for operations.  Carries the status flags raised so far and how
    each signal is handled.'''

    __slots__ = ('flags', 'handlers', 'exceptions')

    def __init__(self, *, flags=0):
        '''flags represents the initially raised flags.'''
        self.flags = flags
        self.handlers = {}
        self.exceptions = []

    def copy(self):
        '''Return a (deep) copy of the context.'''
        # A deep copy is needed because handlers and exceptions are mutable containers
        return copy.deepcopy(self)

    def set_handler(self, exc_classes, kind, handler=None):
        classes = (exc_classes, ) if not isinstance(exc_classes, (tuple, list)) else exc_classes
        if not all(issubclass(exc_class, DecimalError) for exc_class in classes):
            raise TypeError('all exception classes must be subclasses of DecimalError')
        if not isinstance(kind, HandlerKind):
            raise TypeError('kind must be a HandlerKind instance')
        if (handler is not None) ^ kind.requires_handler():
            if handler is None:
                raise ValueError(f'handler not given for kind {kind!r}')
            else:
                raise ValueError(f'handler given for kind {kind!r}')
        pair = (kind, handler)
        for exc_class in classes:
            self.handlers[exc_class] = pair

    def handler(self, exc_class):
        '''Return a (handler_kind, callback) pair for a signal class.'''
        if not issubclass(exc_class, DecimalError):
            raise TypeError('exc_class must be a subclass of DecimalError')

        for cls in exc_class.mro():
            handler = self.handlers.get(cls)
            if handler:
                return handler

        return HandlerKind.DEFAULT, None

    def __repr__(self):
        return f'<Context flags={self.flags!r}>'


class DecimalFormat(NamedTuple):
    '''A packed decimal format.  Only instantiate indirectly through the from_ constructors.

    The word is fmt_width bits wide.  From the most significant end it holds a sign bit,
    an e_width bit exponent field storing the exponent plus e_bias, and a significand
    field of field_width bits.  Only the low significand_bits bits of the significand
    field are used; the bits above them are headroom and always written as zero.

    The value of a word is (-1)^sign * significand * 10^(e_biased - e_bias).

    An exponent field of all ones is reserved as a sentinel; values carrying it are not
    normal, but are otherwise handled like any other value.
    '''

    # These three attributes determine the rest, which are pre-calculated for efficiency
    fmt_width: int
    e_width: int
    significand_bits: int

    # All a function of the 3 values above
    field_width: int
    sign_offset: int
    exponent_offset: int
    e_bias: int
    exponent_mask: int
    significand_mask: int
    field_mask: int
    word_mask: int

    _converters = {}

    @classmethod
    def from_pair(cls, fmt_width, e_width, significand_bits):
        '''Make a DecimalFormat with pre-calculated values.  All constructors ultimately
        call this one.'''
        if not all(isinstance(arg, int) for arg in (fmt_width, e_width, significand_bits)):
            raise TypeError('fmt_width, e_width and significand_bits must be integers')
        if fmt_width % 8:
            raise ValueError('fmt_width must be a whole number of bytes')
        if e_width < 2:
            raise ValueError('e_width must be at least 2')
        field_width = fmt_width - 1 - e_width
        if not 0 < significand_bits <= field_width:
            raise ValueError(f'significand_bits must be between 1 and {field_width}')
        sign_offset = fmt_width - 1
        exponent_offset = sign_offset - e_width
        e_bias = (1 << (e_width - 1)) - 1
        exponent_mask = (1 << e_width) - 1
        significand_mask = (1 << significand_bits) - 1
        field_mask = (1 << field_width) - 1
        word_mask = (1 << fmt_width) - 1
        return cls(fmt_width, e_width, significand_bits, field_width, sign_offset,
                   exponent_offset, e_bias, exponent_mask, significand_mask, field_mask,
                   word_mask)

    @classmethod
    def from_width(cls, fmt_width):
        '''The standard format for the given width.  Both leave two bits of headroom at the
        top of the significand field.'''
        if fmt_width == 32:
            return cls.from_pair(32, 8, 21)
        if fmt_width == 64:
            return cls.from_pair(64, 11, 50)
        raise ValueError(f'no standard packed decimal format of width {fmt_width}')

    @property
    def e_min(self):
        '''The smallest exponent the exponent field can hold.'''
        return -self.e_bias

    @property
    def e_max(self):
        '''The largest exponent of a normal value.'''
        return self.exponent_mask - 1 - self.e_bias

    def __repr__(self):
        return (f'DecimalFormat(fmt_width={self.fmt_width}, e_width={self.e_width}, '
                f'significand_bits={self.significand_bits})')

    def _compose(self, sign, e_biased, significand):
        '''Return the word with the given fields.  They must already be in range.'''
        return (int(sign) << self.sign_offset) | (e_biased << self.exponent_offset) | significand

    def _encode(self, op_tuple, sign, exponent, magnitude, context):
        '''Return the value ± magnitude * 10^exponent, signalling if the exponent wraps or the
        magnitude loses bits.'''
        e_biased = (exponent + self.e_bias) & self.exponent_mask
        significand = magnitude & self.significand_mask
        result = PackedDecimal(self, self._compose(sign, e_biased, significand))

        if e_biased != exponent + self.e_bias:
            result = ExponentWrapped(op_tuple, result).signal(context)
        if significand != magnitude:
            result = Truncated(op_tuple, result).signal(context)
        return result

    def make_zero(self, sign=False):
        '''Return a zero of the given sign with exponent zero.'''
        return PackedDecimal(self, self._compose(sign, self.e_bias, 0))

    def from_word(self, word):
        '''Return the value whose packed word is word.'''
        return PackedDecimal(self, word)

    def from_parts(self, magnitude, exponent, sign=False, context=None):
        '''Return the value ± magnitude * 10^exponent.

        The exponent is stored modulo the width of the exponent field and the magnitude is
        masked to the significand; both losses are silent in the default context but are
        signalled as ExponentWrapped and Truncated respectively.'''
        if not isinstance(magnitude, int) or not isinstance(exponent, int):
            raise TypeError('magnitude and exponent must be integers')
        if magnitude < 0:
            raise ValueError(f'magnitude cannot be negative: {magnitude}')
        op_tuple = (OP_FROM_PARTS, magnitude, exponent, sign)
        return self._encode(op_tuple, bool(sign), exponent, magnitude, context)

    def from_parts_exact(self, magnitude, exponent, sign=False):
        '''As from_parts(), but raise ValueError rather than lose any part of the value, or
        produce a value that is not normal.'''
        if not isinstance(magnitude, int) or not isinstance(exponent, int):
            raise TypeError('magnitude and exponent must be integers')
        if not 0 <= magnitude <= self.significand_mask:
            raise ValueError(f'magnitude {magnitude:,d} out of range')
        if not self.e_min <= exponent <= self.e_max:
            raise ValueError(f'exponent {exponent:,d} out of range')
        return PackedDecimal(self, self._compose(bool(sign), exponent + self.e_bias, magnitude))

    def from_int(self, value, exponent=0, context=None):
        '''Return the value * 10^exponent.  The sign is taken from value and its magnitude
        masked to the significand as for from_parts().'''
        if not isinstance(value, int):
            raise TypeError('from_int requires an integer')
        if not isinstance(exponent, int):
            raise TypeError('exponent must be an integer')
        op_tuple = (OP_FROM_INT, value, exponent)
        return self._encode(op_tuple, value < 0, exponent, abs(value), context)

    def _from_int(self, value, context):
        '''from_int at exponent zero but takes a context for from_value dispatch.'''
        return self.from_int(value, 0, context)

    def from_value(self, value, context=None):
        '''Return a packed decimal derived from value.  Values of type int, str, bytes and
        PackedDecimal are accepted, and passed on to from_int, from_string, unpack_value and
        convert respectively.'''
        converter = DecimalFormat._converters.get(type(value))
        if not converter:
            raise TypeError(f'from_value cannot convert values of type {type(value)}')
        return converter(self, value, context)

    def convert(self, value, context=None):
        '''Return the value converted to this format.  Values of another format are re-encoded
        from their parts, which can signal.'''
        if value.fmt == self:
            return value
        sign, exponent, significand = value.as_tuple()
        op_tuple = (OP_CONVERT, value)
        return self._encode(op_tuple, sign, exponent, significand, context)

    def convert_for_arith(self, value):
        '''Convert value to something capable of doing arithmetic with this format.

        Values of this format are returned unmodified.  Python ints are converted to this
        format.  Otherwise None is returned.
        '''
        if isinstance(value, PackedDecimal):
            return value if value.fmt == self else None
        if isinstance(value, int):
            return self.from_int(value)
        return None

    ##
    ## Packing to and from bytes.
    ##

    def pack(self, sign, e_biased, field, endianness=None):
        '''Packs the fields of a packed decimal as bytes of the given endianness.

        Endianness can be 'big' or 'little'.  If None, host-native endianness is used.

        e_biased is the stored exponent field and field the raw significand field,
        including any headroom bits.
        '''
        if not 0 <= field <= self.field_mask:
            raise ValueError('significand field out of range')
        if not 0 <= e_biased <= self.exponent_mask:
            raise ValueError('biased exponent out of range')
        word = self._compose(sign, e_biased, field)
        return word.to_bytes(self.fmt_width // 8, endianness or host_endianness)

    def unpack(self, raw, endianness=None):
        '''Decode a binary encoding and return a DecimalTuple.

        Endianness can be 'big' or 'little'.  If None, host-native endianness is used.'''
        return self.unpack_value(raw, endianness).as_tuple()

    def unpack_value(self, raw, endianness=None):
        '''Decode a binary encoding and return a PackedDecimal.

        Endianness can be 'big' or 'little'.  If None, host-native endianness is used.'''
        size = self.fmt_width // 8
        if len(raw) != size:
            raise ValueError(f'expected {size} bytes to unpack; got {len(raw)}')
        return PackedDecimal(self, int.from_bytes(raw, endianness or host_endianness))

    def _unpack_value(self, raw, _context):
        '''unpack_value but takes a context for from_value dispatch.'''
        return self.unpack_value(raw)

    ##
    ## Text conversion.
    ##

    def parse(self, string, context=None):
        '''Parse a decimal number from the start of string.  Return a pair (value, consumed)
        where consumed is the number of characters read; parsing stops at the first
        character that cannot continue the number.

        Digits are folded into the significand while it fits the mask.  Integer digits
        beyond that each increment the exponent and lose their value; fractional digits
        beyond that, or after any integer digit was lost, are dropped.  Losing a non-zero
        digit signals Truncated.
        '''
        if not isinstance(string, str):
            raise TypeError('parse requires a string')

        op_tuple = (OP_FROM_STRING, string)
        mask = self.significand_mask
        end = len(string)
        pos = 0
        sign = string[:1] == '-'
        if sign:
            pos += 1

        significand = 0
        exponent = 0
        lost = False
        while pos < end and string[pos] in DIGITS:
            digit = DIGITS.index(string[pos])
            folded = significand * 10 + digit
            if exponent == 0 and folded <= mask:
                significand = folded
            else:
                exponent += 1
                lost = lost or digit != 0
            pos += 1

        if pos < end and string[pos] == '.':
            pos += 1
            folding = exponent <= 0
            while pos < end and string[pos] in DIGITS:
                digit = DIGITS.index(string[pos])
                folded = significand * 10 + digit
                # Without the mask test the digit would be folded and then masked away
                # on encoding, e.g. "1.23456789" giving (12345678 & mask, -7)
                if folding and folded <= mask:
                    significand = folded
                    exponent -= 1
                else:
                    folding = False
                    lost = lost or digit != 0
                pos += 1

        result = self._encode(op_tuple, sign, exponent, significand, context)
        if lost:
            result = Truncated(op_tuple, result).signal(context)
        return result, pos

    def from_string(self, string, context=None):
        '''Convert a string to a packed decimal of this format.  Unlike parse() the whole
        string must be a decimal number, otherwise SyntaxError is raised.'''
        if not isinstance(string, str):
            raise TypeError('from_string requires a string')
        if DEC_STRING_REGEX.fullmatch(string) is None:
            raise SyntaxError(f'invalid decimal string: {string}')
        value, _consumed = self.parse(string, context)
        return value

    def to_string(self, value, text_format=None, context=None):
        '''Return a plain decimal representation of the value converted to this format.  See
        TextFormat for output control.'''
        text_format = text_format or DefaultTextFormat
        return text_format.format_value(self.convert(value, context))

    ##
    ## Arithmetic.  Operands must be of this format.
    ##

    def add(self, lhs, rhs, context=None):
        '''Return the sum LHS + RHS in this format.'''
        return self._add_sub((OP_ADD, lhs, rhs), lhs, rhs, False, context)

    def subtract(self, lhs, rhs, context=None):
        '''Return the difference LHS - RHS in this format.'''
        return self._add_sub((OP_SUBTRACT, lhs, rhs), lhs, rhs, True, context)

    def _add_sub(self, op_tuple, lhs, rhs, is_subtract, context):
        '''Add or subtract values sharing an exponent.

        A zero operand is an identity, except that subtracting from a zero delivers the
        negated magnitude of RHS at the exponent of LHS.  Non-zero operands with different
        exponents are not aligned: LHS is delivered and Unaligned signalled.
        '''
        if lhs.fmt != self or rhs.fmt != self:
            raise TypeError(f'operands must be of format {self!r}')

        lhs_sign, lhs_exponent, lhs_significand = lhs.as_tuple()
        rhs_sign, rhs_exponent, rhs_significand = rhs.as_tuple()

        if lhs_significand == 0:
            if is_subtract:
                return self._encode(op_tuple, not rhs_sign, lhs_exponent, rhs_significand,
                                    context)
            return rhs
        if rhs_significand == 0:
            return lhs
        if lhs_exponent != rhs_exponent:
            return Unaligned(op_tuple, lhs).signal(context)

        lhs_value = -lhs_significand if lhs_sign else lhs_significand
        rhs_value = -rhs_significand if rhs_sign else rhs_significand
        total = lhs_value - rhs_value if is_subtract else lhs_value + rhs_value
        return self._encode(op_tuple, total < 0, lhs_exponent, abs(total), context)


class PackedDecimal(namedtuple('PackedDecimal', 'fmt word')):
    '''Internal Representation
       -----------------------

    A value is its format and its packed word; nothing else is stored.  The fields are
    decoded on demand by sign(), exponent() and significand(), and arithmetic works on
    those decoded parts, re-encoding its result.

    Equality is equality of words: 2 * 10^1 and 20 * 10^0 are different values, as are
    -0.0 and 0.0.
    '''

    def __new__(cls, fmt, word=None):
        '''Validate and create a packed decimal with the given format and word.  If word is
        None the value is a positive zero with exponent zero.
        '''
        if word is None:
            return fmt.make_zero(False)
        if not isinstance(word, int):
            raise TypeError('word must be an integer')
        if not 0 <= word <= fmt.word_mask:
            raise ValueError(f'word {word:#x} out of range')
        return super().__new__(cls, fmt, word)

    ##
    ## Non-computational operations.  These are never exceptional.
    ##

    def data(self):
        '''Return the packed word.'''
        return self.word

    def sign(self):
        '''Return True if the sign bit is set.'''
        return bool(self.word >> self.fmt.sign_offset)

    def e_biased(self):
        '''Return the stored exponent field.'''
        return (self.word >> self.fmt.exponent_offset) & self.fmt.exponent_mask

    def exponent(self):
        '''Return the decimal exponent of the significand.'''
        return self.e_biased() - self.fmt.e_bias

    def significand(self):
        '''Return the significand, without any headroom bits.'''
        return self.word & self.fmt.significand_mask

    def as_tuple(self):
        '''Returns a DecimalTuple: (sign, exponent, significand).'''
        return DecimalTuple(self.sign(), self.exponent(), self.significand())

    def number_class(self):
        '''Return a string describing the class of the number.'''
        sign = '-' if self.sign() else '+'
        if not self.is_normal():
            return sign + 'Reserved'
        if self.is_zero():
            return sign + 'Zero'
        return sign + 'Normal'

    def is_negative(self):
        '''Return True if the sign bit is set.'''
        return self.sign()

    def is_normal(self):
        '''Return True if the exponent field is not the reserved sentinel.'''
        return self.e_biased() != self.fmt.exponent_mask

    def is_zero(self):
        '''Return True if the significand is zero regardless of sign and exponent.'''
        return self.significand() == 0

    def pack(self, endianness=None):
        '''Packs this value to bytes of the given endianness.

        Endianness can be 'big' or 'little'.  If None, host-native endianness is used.'''
        return self.fmt.pack(self.sign(), self.e_biased(), self.word & self.fmt.field_mask,
                             endianness)

    ##
    ## Quiet computational operations
    ##

    def set_sign(self, sign):
        '''Returns a copy of this number with the given sign.'''
        if self.sign() == bool(sign):
            return self
        return PackedDecimal(self.fmt, self.word ^ (1 << self.fmt.sign_offset))

    def copy_abs(self):
        '''Return this value with sign False (positive).'''
        return self.set_sign(False)

    def copy_negate(self):
        '''Return this value with the opposite sign.  Only the sign bit changes, so the
        negation of 0.0 is -0.0, which does not equal it.'''
        return self.set_sign(not self.sign())

    def copy_sign(self, y):
        '''Return this value but with the sign of y.'''
        return self.set_sign(y.sign())

    def __repr__(self):
        return self.to_string()

    def __str__(self):
        return self.to_string()

    def to_string(self, text_format=None):
        '''Return the value as plain decimal text.  See TextFormat for output control.'''
        return (text_format or DefaultTextFormat).format_value(self)

    def __abs__(self):
        '''Return this value with sign False (positive).'''
        return self.copy_abs()

    def __neg__(self):
        '''Return this value with the opposite sign (unary minus).'''
        return self.copy_negate()

    def __pos__(self):
        '''Return this value (unary plus).'''
        return self

    def __eq__(self, other):
        compare = compare_eq(self, other)
        if compare is None:
            return NotImplemented
        return compare

    def __ne__(self, other):
        compare = compare_eq(self, other)
        if compare is None:
            return NotImplemented
        return not compare

    # Values are not ordered; only their words are compared
    def __lt__(self, other):
        return NotImplemented

    __le__ = __gt__ = __ge__ = __lt__

    def __bool__(self):
        return not self.is_zero()

    def __add__(self, other):
        other = self.fmt.convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.fmt.add(self, other)

    def __sub__(self, other):
        other = self.fmt.convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.fmt.subtract(self, other)

    def __radd__(self, other):
        other = self.fmt.convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.fmt.add(other, self)

    def __rsub__(self, other):
        other = self.fmt.convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.fmt.subtract(other, self)

    def __hash__(self):
        '''Python hash.  Must hash equally to the int with the same word.'''
        sign, exponent, significand = self.as_tuple()
        if exponent == 0:
            return hash(-significand if sign else significand)
        return hash((self.fmt, self.word))


DecimalFormat._converters = {
    int: DecimalFormat._from_int,
    str: DecimalFormat.from_string,
    bytes: DecimalFormat._unpack_value,
    bytearray: DecimalFormat._unpack_value,
    memoryview: DecimalFormat._unpack_value,
    PackedDecimal: DecimalFormat.convert,
}


def compare_eq(value, other):
    '''LHS is a PackedDecimal.  Return True if other has the same word, False if not, and
    None if other is not comparable.  Never signals.

    An int is equal only to the word from_int() would give it without truncation.'''
    fmt = value.fmt
    if isinstance(other, PackedDecimal):
        if other.fmt != fmt:
            return None
        return value.word == other.word
    if isinstance(other, int):
        magnitude = abs(other)
        if magnitude > fmt.significand_mask:
            return False
        return value.word == fmt._compose(other < 0, fmt.e_bias, magnitude)
    return None


#
# Exported functions
#

DefaultContext = Context()
tls = threading.local()


def get_context():
    try:
        return tls.context
    except AttributeError:
        tls.context = DefaultContext.copy()
        return tls.context


def set_context(context):
    '''Sets the current thread's context to context (not a copy of it).'''
    tls.context = context


class LocalContext:
    '''A context manager that will set the current context for the active thread to a copy of
    context on entry to the with-statement and restore the previous context on exit.  If
    no context is specified a copy of the current context is taken instead.
    '''

    def __init__(self, context=None):
        self.saved_context = None
        self.context_to_set = context

    def __enter__(self):
        self.saved_context = get_context()
        context = (self.context_to_set or self.saved_context).copy()
        set_context(context)
        return context

    def __exit__(self, etype, value, traceback):
        set_context(self.saved_context)


local_context = LocalContext

#
# Constants are predefined formats.
#

host_endianness = sys.byteorder

Decimal32 = DecimalFormat.from_width(32)
Decimal64 = DecimalFormat.from_width(64)

DIGITS = '0123456789'
DEC_STRING_REGEX = re.compile(
    # sign[opt]
    '-?'
    # (dec-integer[opt].fraction or dec-integer.[opt])
    '([0-9]*\\.[0-9]+|[0-9]+\\.?)',
    re.ASCII
)
