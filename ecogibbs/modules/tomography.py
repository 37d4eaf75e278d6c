import numpy as np

from ..dataclass import EcoData
from ..exceptions import InfeasibleStart
from ..links import get_link
from ..utils import mvn_logpdf_precision, sample_cumulative
from .module import Module


def grid_points(lower,upper,X,Y,resolution=1000):
    r'''
    Evenly spaced points on the tomography line of one unit, W1 in (lower, upper).

    The leftover of the interval is split between both ends so that no point
    lands on a bound. Intervals shorter than two steps get two probe points at
    one and two thirds.
    '''
    step = 1.0/resolution
    width = upper - lower
    if width > 2*step:
        n_grid = int(np.floor(width*resolution))
        resid = width - n_grid*step
        W1 = lower + (np.arange(n_grid)+1)*step - (step+resid)/2
        W1 = np.where((W1-lower) < resid/2, W1 + resid/2, W1)
        W1 = np.where((upper-W1) < resid/2, W1 - resid/2, W1)
    else:
        W1 = lower + np.array([1.0,2.0])*width/3
    W2 = (Y - X*W1)/(1 - X)
    return W1, W2


def sample_conditional(w_known,known,mu,Sigma,rng):
    r'''
    Draw the unknown transformed coordinate given the known one, from the
    conditional of N(mu, Sigma). known is the index (0 or 1) of the known coordinate.
    '''
    unknown = 1 - known
    m = mu[unknown] + Sigma[0,1]/Sigma[known,known]*(w_known - mu[known])
    v = Sigma[unknown,unknown]*(1 - Sigma[0,1]**2/(Sigma[0,0]*Sigma[1,1]))
    return rng.normal(m,np.sqrt(v))


class TomographyGrid(Module):
    r'''
        Grid sampler of W on the tomography line of each unit.

        The bivariate normal of the transformed pair, times the Jacobian of the
        link, is evaluated on the grid and one point is drawn from the
        normalized weights.
    '''
    def __init__(self,link='logit',resolution=1000,max_tries=100000):
        super().__init__()
        self.link = get_link(link)
        self.resolution = int(resolution)
        self.max_tries = int(max_tries)
        self.grids = []

    def build(self,data: 'EcoData'):
        bounds = data.bounds
        degenerate = data.degenerate
        self.grids = []
        for i in range(data.n):
            if degenerate[i]:
                self.grids.append(None)
            else:
                self.grids.append(grid_points(bounds[i,0,0],bounds[i,0,1],data.X[i],data.Y[i],self.resolution))

    def log_weights(self,i,mu,InvSigma):
        W1g, W2g = self.grids[i]
        with np.errstate(divide='ignore',invalid='ignore'):
            wstar = self.link(np.stack([W1g,W2g],-1))
            logp = mvn_logpdf_precision(wstar,mu,InvSigma) + self.link.log_jacobian(W1g) + self.link.log_jacobian(W2g)
        # points whose inverse link is outside (0,1) get no weight
        logp[~np.isfinite(logp)] = -np.inf
        return logp

    def cumulative(self,i,mu,InvSigma):
        logp = self.log_weights(i,mu,InvSigma)
        if np.all(np.isneginf(logp)):
            prob = np.ones_like(logp)
        else:
            prob = np.exp(logp - logp.max())
        cum = np.cumsum(prob)
        return cum / cum[-1]

    def sample(self,i,mu,InvSigma):
        cum = self.cumulative(i,mu,InvSigma)
        j = sample_cumulative(cum,self.rng.uniform())
        W1g, W2g = self.grids[i]
        return W1g[j], W2g[j]

    def initial(self,i,data: 'EcoData'):
        r'''
        Starting value of W for unit i, uniform W1 accepted inside the bounds.
        '''
        lower, upper = data.bounds[i,0]
        X, Y = data.X[i], data.Y[i]
        if upper - lower <= 2.0/self.resolution:
            W1 = lower + (upper-lower)/2
            return W1, (Y - X*W1)/(1 - X)
        for _ in range(self.max_tries):
            W1 = self.rng.uniform()
            if lower < W1 < upper:
                return W1, (Y - X*W1)/(1 - X)
        raise InfeasibleStart("gibbs sampler cannot start because bounds are too tight: unit {} X {:5g} Y {:5g} [{:5g},{:5g}]".format(
            i,X,Y,lower,upper))
