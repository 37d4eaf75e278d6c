import warnings
import numpy as np
import scipy.linalg as la
from scipy.integrate import quad

from .dataclass import tomography_bounds
from .exceptions import IntegrationNonconvergence, InvalidSufficientStatisticKind
from .links import get_link

# Moment functionals of the transformed pair (W1*, W2*)
SUFFICIENT_STATISTICS = {
    'density': lambda w, link: 1.0,
    'W1': lambda w, link: w[0],
    'W2': lambda w, link: w[1],
    'W1W1': lambda w, link: w[0]*w[0],
    'W1W2': lambda w, link: w[0]*w[1],
    'W2W2': lambda w, link: w[1]*w[1],
    'invlink_W1': lambda w, link: link.inverse(w[0]),
    'invlink_W2': lambda w, link: link.inverse(w[1]),
    'likelihood': None,
}

# Integer tags: -1 plain density, 0..7 in the order above
SUFFICIENT_STATISTIC_CODES = {
    -1: 'density', 0: 'W1', 1: 'W2', 2: 'W1W1', 3: 'W1W2', 4: 'W2W2',
    5: 'invlink_W1', 6: 'invlink_W2', 7: 'likelihood'
}

# QUADPACK ier codes, recovered from the message scipy returns
QUADPACK_STATUS = (
    (1, "The maximum number"),
    (2, "The occurrence of roundoff error"),
    (3, "Extremely bad integrand behavior"),
    (4, "The algorithm does not converge"),
    (5, "The integral is probably divergent"),
    (6, "The input is invalid"),
    (7, "Abnormal termination"),
)

def quadpack_status(message):
    for code, prefix in QUADPACK_STATUS:
        if str(message).strip().startswith(prefix):
            return code
    return -1


class TruncatedBVN(object):
    r'''
    Bivariate normal density of (W1*, W2*) = link(W1, W2), restricted to the
    tomography line of one unit.

    The line is parametrized by t in (0,1):
        W1(t) = (W1max - W1min) t + W1min
        W2(t) = (W2min - W2max) t + W2max
    and integrals over t are computed with adaptive quadrature. The domain is
    clipped to (lower, upper) to stay away from the singular Jacobian of the link
    at the end points.
    '''
    lower = 1e-5
    upper = 1 - 1e-5

    def __init__(self,X,Y,mu,Sigma,link='logit',bounds=None,epsabs=1e-9,epsrel=1e-9,limit=100):
        self.X = float(X)
        self.Y = float(Y)
        self.mu = np.asarray(mu,dtype=float).ravel()
        self.Sigma = np.asarray(Sigma,dtype=float)
        if self.mu.shape != (2,) or self.Sigma.shape != (2,2):
            raise ValueError("mu must be (2,) and Sigma (2 x 2)")
        self.iSigma = la.inv(self.Sigma)
        self.link = get_link(link)
        if bounds is None:
            bounds = tomography_bounds(self.X,self.Y)[0]
        self.bounds = np.asarray(bounds,dtype=float)
        self.epsabs = epsabs
        self.epsrel = epsrel
        self.limit = limit

        S = self.Sigma
        self.rho = S[0,1]/np.sqrt(S[0,0]*S[1,1])
        self._prefactor = 1/(2*np.pi*np.sqrt(S[0,0]*S[1,1]*(1-self.rho**2)))
        self._normc = None

    def point(self,t):
        W1 = (self.bounds[0,1] - self.bounds[0,0])*t + self.bounds[0,0]
        W2 = (self.bounds[1,0] - self.bounds[1,1])*t + self.bounds[1,1]
        return W1, W2

    def node(self,t):
        r'''
        Transformed pair and arc length factor at t, None if the point is not inside the unit square.
        '''
        W1, W2 = self.point(t)
        if W1 <= 0 or W1 >= 1 or W2 <= 0 or W2 >= 1:
            return None
        W1p = (self.bounds[0,1] - self.bounds[0,0]) * self.link.derivative(W1)
        W2p = (self.bounds[1,0] - self.bounds[1,1]) * self.link.derivative(W2)
        wstar = np.array([self.link(W1),self.link(W2)])
        return wstar, np.sqrt(W1p*W1p + W2p*W2p)

    def density(self,wstar):
        d0, d1 = wstar - self.mu
        S = self.Sigma
        quad_form = d0*d0/S[0,0] + d1*d1/S[1,1] - 2*self.rho*d0*d1/np.sqrt(S[0,0]*S[1,1])
        return np.exp(-quad_form/(2*(1-self.rho**2))) * self._prefactor

    def likelihood(self,wstar):
        # Density under the general covariance, through its inverse
        d = wstar - self.mu
        return np.exp(-0.5*(d @ self.iSigma @ d)) / (2*np.pi*np.sqrt(la.det(self.Sigma)))

    def _normalizing_integrand(self,t):
        node = self.node(t)
        if node is None:
            return 0.0
        wstar, arc = node
        return self.density(wstar)*arc

    def _sufficient_integrand(self,t,kind):
        node = self.node(t)
        if node is None:
            return 0.0
        wstar, arc = node
        if kind == 'likelihood':
            return self.likelihood(wstar)*arc
        moment = SUFFICIENT_STATISTICS[kind]
        return self.density(wstar)/self.normalizing_constant()*arc*moment(wstar,self.link)

    def _integrate(self,f,kind,args=()):
        res = quad(f,self.lower,self.upper,args=args,epsabs=self.epsabs,epsrel=self.epsrel,limit=self.limit,full_output=1)
        estimate, abserr = res[0], res[1]
        if len(res) > 3:
            warnings.warn(IntegrationNonconvergence(status=quadpack_status(res[3]),X=self.X,Y=self.Y,
                bounds=self.bounds,kind=kind,estimate=estimate,abserr=abserr),stacklevel=3)
        return estimate

    def normalizing_constant(self):
        if self._normc is None:
            self._normc = self._integrate(self._normalizing_integrand,'normc')
        return self._normc

    def expectation(self,kind='density'):
        r'''
        Integral of the normalized density times a moment functional of (W1*, W2*).

        kind: one of SUFFICIENT_STATISTICS, or its integer code.
        '''
        kind = SUFFICIENT_STATISTIC_CODES.get(kind,kind) if not isinstance(kind,str) else kind
        if kind not in SUFFICIENT_STATISTICS:
            warnings.warn("Unknown sufficient statistic {}, integrand set to zero".format(kind),
                InvalidSufficientStatisticKind,stacklevel=2)
            return 0.0
        if kind != 'likelihood':
            self.normalizing_constant()
        return self._integrate(self._sufficient_integrand,kind,args=(kind,))

    def loglikelihood(self):
        return np.log(self.expectation('likelihood'))
