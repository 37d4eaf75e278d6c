import numpy as np
from scipy.integrate import IntegrationWarning


class InfeasibleStart(RuntimeError):
    r'''
    Raised when no starting value of W can be found inside the bounds of a unit.
    '''
    pass


class IntegrationNonconvergence(IntegrationWarning):
    r'''
    Quadrature over a tomography line did not reach the requested tolerance.

    The best estimate is still used, the warning carries the context of the failing unit.
    '''
    def __init__(self,status,X,Y,bounds,kind,estimate,abserr):
        self.status = status
        self.X = X
        self.Y = Y
        self.bounds = np.asarray(bounds)
        self.kind = kind
        self.estimate = estimate
        self.abserr = abserr
        W1min, W1max = self.bounds[0]
        message = "Integration error {}: kind {} X {:5g} Y {:5g} [{:5g},{:5g}] -> {:5g} +- {:5g}".format(
            status,kind,X,Y,W1min,W1max,estimate,abserr)
        super().__init__(message)


class InvalidSufficientStatisticKind(RuntimeWarning):
    pass
