from .machine import Addr, Context, Heap, Machine, Stream
from .parser import Program, parse
