"""
Limitador de requests por ventana de un segundo.

Airtable admite 5 requests por segundo por base. El job es de un solo hilo,
asi que basta con bloquear el hilo el resto del segundo cuando se completa
la ventana.
"""
from __future__ import annotations

import time
from typing import Callable


class RateLimiter:
    """
    Cuenta llamadas y duerme cuando se alcanzan N dentro de la misma ventana.
    
    Uso:
        limiter = RateLimiter(max_per_second=5)
        for record in records:
            send(record)
            limiter.throttle()
    
    La ventana se mide contra el reloj (no se acumulan los sleeps), por lo
    que no hay deriva entre ventanas.
    """

    def __init__(
        self,
        max_per_second: int = 5,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_per_second < 1:
            raise ValueError("max_per_second debe ser >= 1")
        self._max_per_second = max_per_second
        self._clock = clock
        self._sleep = sleep
        self._count = 0
        self._window_start = clock()

    @property
    def max_per_second(self) -> int:
        return self._max_per_second

    def throttle(self) -> float:
        """
        Registra una llamada. Si es la N-esima de la ventana y no paso un
        segundo desde que empezo, duerme el resto.
        
        Returns:
            Segundos dormidos (0.0 si no hizo falta esperar).
        """
        self._count += 1
        if self._count < self._max_per_second:
            return 0.0

        slept = 0.0
        elapsed = self._clock() - self._window_start
        if elapsed < 1.0:
            slept = 1.0 - elapsed
            self._sleep(slept)

        self._count = 0
        self._window_start = self._clock()
        return slept
