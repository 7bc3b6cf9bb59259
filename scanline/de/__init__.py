"""Runtime deserializer for whitespace separated text."""

from .access import SeqAccess as SeqAccess
from .access import StructAccess as StructAccess
from .access import VariantAccess as VariantAccess
from .cursor import Cursor as Cursor
from .deserializer import Deserializer as Deserializer
from .deserializer import Options as Options
from .deserializer import VariantMatch as VariantMatch
from .deserializer import from_str as from_str
from .deserializer import next_line as next_line
from .errors import *
from .shapes import *
from .tokenizer import Token as Token
from .tokenizer import tokenize as tokenize
from .visitor import ValueVisitor as ValueVisitor
from .visitor import Variant as Variant
from .visitor import Visitor as Visitor
