# tests/unit/cli/test_helpers.py
# Unit tests for CLI helpers (interrupt routing into cancel tokens)

import os
import signal

from create_image.cli.helpers import cancel_on_interrupt
from create_image.core.cancellation import CancelToken


class TestCancelOnInterrupt:
    # * Verify SIGINT sets the token instead of raising KeyboardInterrupt
    def test_sigint_cancels_token(self):
        cancel = CancelToken()

        with cancel_on_interrupt(cancel):
            os.kill(os.getpid(), signal.SIGINT)
            # give the interpreter a chance to run the handler
            cancel.wait(1.0)

        assert cancel.cancelled is True
        assert cancel.reason == "Interrupted by user"

    # * Verify the previous handlers are restored on exit
    def test_handlers_restored(self):
        before_int = signal.getsignal(signal.SIGINT)
        before_term = signal.getsignal(signal.SIGTERM)

        with cancel_on_interrupt(CancelToken()):
            assert signal.getsignal(signal.SIGINT) is not before_int

        assert signal.getsignal(signal.SIGINT) is before_int
        assert signal.getsignal(signal.SIGTERM) is before_term
