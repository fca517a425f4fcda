"""
Real-time pacing of the CPU and the 60Hz timers.

Elapsed wall-clock time feeds two budgets. The instruction budget is drained
one CPU cycle per whole instruction period, so a slow step is caught up with a
burst of cycles. The timer budget ticks the delay and sound timers at most once
per step; under sustained slowness the timers lag rather than burst.

Budgets are integers counted in nanoseconds times the rate, so a run is an
exact function of the summed elapsed time however it was split into steps.
"""
import logging
import time

from .cpu import CPU

log = logging.getLogger(__name__)

NS_PER_SECOND = 1_000_000_000
TIMER_HZ = 60
TIMER_PERIOD = 1.0 / TIMER_HZ


class Scheduler:
    def __init__(self, machine, instructions_per_second=700, cpu=None, on_timer_tick=None,
                 clock=time.perf_counter_ns):
        if instructions_per_second <= 0:
            raise ValueError("instructions_per_second must be positive")
        self.machine = machine
        self.cpu = cpu if cpu is not None else CPU(machine)
        self.instructions_per_second = int(instructions_per_second)
        self.on_timer_tick = on_timer_tick
        self.clock = clock
        self.paused = False
        self.reset()

    def reset(self):
        """Drop any leftover budget and restart timing from now."""
        self.instruction_budget = 0
        self.timer_budget = 0
        self.last_step = self.clock()

    def step(self):
        """Advance by the wall-clock time since the previous step."""
        now = self.clock()
        elapsed_ns = now - self.last_step
        self.last_step = now
        if self.paused:
            return 0, 0
        return self.advance_ns(elapsed_ns)

    def advance(self, elapsed):
        """Advance by ``elapsed`` seconds; returns (instructions run, timer ticks)."""
        return self.advance_ns(round(elapsed * NS_PER_SECOND))

    def advance_ns(self, elapsed_ns):
        self.instruction_budget += elapsed_ns * self.instructions_per_second
        self.timer_budget += elapsed_ns * TIMER_HZ

        executed = 0
        while self.instruction_budget >= NS_PER_SECOND:
            self.instruction_budget -= NS_PER_SECOND
            self.cpu.cycle()
            executed += 1

        ticks = 0
        if self.timer_budget >= NS_PER_SECOND:
            self.machine.tick_timers()
            self.timer_budget -= NS_PER_SECOND
            ticks = 1
            if self.on_timer_tick is not None:
                self.on_timer_tick(self.machine.sound_timer)

        return executed, ticks

    def pause(self):
        self.paused = True
        log.info("Paused")

    def resume(self):
        # time spent paused is dropped, not replayed as a burst
        self.last_step = self.clock()
        self.paused = False
        log.info("Resumed")

    def toggle_pause(self):
        if self.paused:
            self.resume()
        else:
            self.pause()
