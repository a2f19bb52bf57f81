"""Inter-core mailbox FIFOs."""

from __future__ import annotations

from .peripheral import Fifo, Requestor

MAILBOX_DEPTH = 8


def _own_index(requestor: Requestor) -> int:
    return 1 if requestor == Requestor.PROC1 else 0


class Mailboxes:
    """Two FIFOs: core 0 writes FIFO 0 and reads FIFO 1, core 1 the reverse."""

    def __init__(self) -> None:
        self.data = [Fifo(MAILBOX_DEPTH), Fifo(MAILBOX_DEPTH)]
        self.roe = [False, False]  # sticky read-on-empty
        self.wof = [False, False]  # sticky write-on-full

    def state(self, requestor: Requestor) -> int:
        index = _own_index(requestor)
        vld = int(self.data[index].is_empty())
        rdy = int(self.data[index].is_full())
        wof = int(self.wof[index])
        roe = int(self.roe[index])
        return vld | (rdy << 1) | (wof << 2) | (roe << 3)

    def read(self, requestor: Requestor) -> int:
        """Pop from this core's RX FIFO; an empty FIFO reads 0 and sets ROE."""
        if requestor == Requestor.PROC0:
            index, roe_index = 1, 0
        elif requestor == Requestor.PROC1:
            index, roe_index = 0, 1
        else:
            index, roe_index = 0, 0

        value = self.data[index].pop()
        if value is None:
            self.roe[roe_index] = True
            return 0
        return value

    def write(self, value: int, requestor: Requestor) -> None:
        """Push to this core's TX FIFO; a full FIFO drops the value and sets WOF."""
        index = _own_index(requestor)
        try:
            self.data[index].push(value)
        except OverflowError:
            self.wof[index] = True

    def clear_roe(self, requestor: Requestor) -> None:
        if requestor in (Requestor.PROC0, Requestor.PROC1):
            self.roe[int(requestor)] = False

    def clear_wof(self, requestor: Requestor) -> None:
        if requestor in (Requestor.PROC0, Requestor.PROC1):
            self.wof[int(requestor)] = False