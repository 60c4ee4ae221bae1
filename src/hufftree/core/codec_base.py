from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from hufftree.core.bitio import BitInputStream, BitOutputStream
from hufftree.errors import CorruptPayload, ErrorKind


@dataclass(frozen=True)
class CompressStats:
    bytes_in: int
    bits_out: int
    leaves: int


@dataclass(frozen=True)
class DecodeResult:
    """
    Outcome of a decode call.

    Format failures are carried in `error` instead of being raised; whatever
    was written before the failure is already in the output stream.
    """

    bytes_out: int
    bits_in: int
    error: CorruptPayload | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return None if self.error is None else self.error.kind

    def raise_for_error(self) -> "DecodeResult":
        if self.error is not None:
            raise self.error
        return self


class Codec(ABC):
    """
    Interfaccia minima per codec su bit stream.

    compress() consuma l'input due volte (reset() in mezzo) e chiude l'output;
    decompress() chiude l'output anche in caso di errore di formato.
    """

    codec_id: str

    @abstractmethod
    def compress(self, bits_in: BitInputStream, bits_out: BitOutputStream) -> CompressStats:
        raise NotImplementedError

    @abstractmethod
    def decompress(self, bits_in: BitInputStream, bits_out: BitOutputStream) -> DecodeResult:
        raise NotImplementedError
