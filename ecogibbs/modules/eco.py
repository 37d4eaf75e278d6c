import numpy as np

from ..dataclass import EcoData
from ..integrate import TruncatedBVN
from ..links import get_link
from ..utils import clamp, cov2triu
from .module import Module
from .mixture import InfiniteMixture, PolyaUrn
from .tomography import TomographyGrid, sample_conditional


class EcoDP(Module):
    r'''
        Nonparametric Bayesian model of ecological inference in 2x2 tables.

        The transformed unknowns (link(W1), link(W2)) of each unit follow a
        Dirichlet process mixture of bivariate normals, with a Normal-Wishart
        base measure and a Gamma prior on the concentration alpha.

        Gibbs sampling. One call runs one iteration:
            1. W of every unit given its (mu, Sigma), on the tomography line
               (grid) or from the conditional normal for homogeneous areas.
            2. Polya urn sweep and remix of the (mu, Sigma).
            3. alpha, if learn is True.

        Examples
        --------
        >>> data = EcoData(X=[.3,.7],Y=[.4,.6])
        >>> model = EcoDP(link='logit',seed=1)
        >>> sampler = Gibbs()
        >>> sampler.fit(data,model,samples=500,burn_in=100)
    '''
    def __init__(self,link='logit',mu0=0,tau0=2,nu0=4,S0=10,alpha=1,a0=1,b0=0.1,learn=True,predict=False,loglik=False,seed=None,resolution=1000,max_init_tries=100000):
        super().__init__()
        self.link = get_link(link)
        self.predict = predict
        self.loglik = loglik

        self.urn = PolyaUrn(mu0=mu0,tau0=tau0,nu0=nu0,S0=S0)
        self.mix = InfiniteMixture(alpha=alpha,a0=a0,b0=b0,learn=learn)
        self.grid = TomographyGrid(link=self.link,resolution=resolution,max_tries=max_init_tries)
        self.data = None

        self._parameters['W'] = np.zeros((0,2))
        self._parameters['Wstar'] = np.zeros((0,2))
        self.seed(seed)

    @property
    def theta(self):
        return self.urn.theta

    def _check_input(self,data: 'EcoData'):
        if not isinstance(data,EcoData):
            raise TypeError("data must be EcoData, got {}".format(type(data).__name__))
        if data is not self.data:
            self.data = data
            self.grid.build(data)
            self.initialize()

    def initialize(self):
        data = self.data
        W = np.zeros((data.t_samp,2))
        Wstar = np.zeros((data.t_samp,2))

        fixed = data.fixed_W()
        for i in range(data.n):
            if data.degenerate[i]:
                W[i] = fixed[i]
            else:
                W[i] = self.grid.initial(i,data)
        Wstar[:data.n] = self.link(W[:data.n])

        # unknown coordinate of homogeneous areas starts at Wstar = 0
        W[data.x1_index,0] = data.x1_W1
        W[data.x1_index,1] = self.link.inverse(0.0)
        Wstar[data.x1_index,0] = self.link(data.x1_W1)
        W[data.x0_index,1] = data.x0_W2
        W[data.x0_index,0] = self.link.inverse(0.0)
        Wstar[data.x0_index,1] = self.link(data.x0_W2)

        W[data.survey_index] = data.survey
        Wstar[data.survey_index] = self.link(data.survey)

        self._parameters['W'] = W
        self._parameters['Wstar'] = Wstar
        self.urn.initialize(data.t_samp)

    def sample_W(self):
        data = self.data
        mu, Sigma, InvSigma = self.urn.mu, self.urn.Sigma, self.urn.InvSigma
        W, Wstar = self.W, self.Wstar

        for i in range(data.n):
            if self.grid.grids[i] is not None:
                W[i] = self.grid.sample(i,mu[i],InvSigma[i])
        Wstar[:data.n] = self.link(W[:data.n])

        # X = 1 areas: W1 known, draw W2
        for i in data.x1_index:
            w = sample_conditional(Wstar[i,0],0,mu[i],Sigma[i],self.rng)
            W[i,1] = clamp(self.link.inverse(w))
            Wstar[i,1] = self.link(W[i,1])

        # X = 0 areas: W2 known, draw W1
        for i in data.x0_index:
            w = sample_conditional(Wstar[i,1],1,mu[i],Sigma[i],self.rng)
            W[i,0] = clamp(self.link.inverse(w))
            Wstar[i,0] = self.link(W[i,0])

    def sample_predictive(self):
        r'''
        Posterior predictive draws of W and Y for every unit with margins.
        '''
        data = self.data
        W_pred = np.zeros((data.n,2))
        for i in range(data.n):
            wstar = self.rng.multivariate_normal(self.urn.mu[i],self.urn.Sigma[i])
            W_pred[i] = self.link.inverse(wstar)
        Y_pred = W_pred[:,0]*data.X + W_pred[:,1]*(1-data.X)
        return W_pred, Y_pred

    def loglikelihood(self):
        r'''
        Log-likelihood of each unit's margins under its current (mu, Sigma),
        integrated along its tomography line. nan for degenerate units.
        '''
        data = self.data
        bounds = data.bounds
        logl = np.full(data.n,np.nan)
        for i in range(data.n):
            if data.degenerate[i]:
                continue
            tbvn = TruncatedBVN(data.X[i],data.Y[i],self.urn.mu[i],self.urn.Sigma[i],link=self.link,bounds=bounds[i])
            logl[i] = tbvn.loglikelihood()
        return logl

    def draws(self):
        n = self.data.n
        yield 'mu', self.urn.mu[:n]
        yield 'Sigma', cov2triu(self.urn.Sigma[:n])
        yield 'W', self.W[:n]
        yield 'alpha', self.mix.alpha
        yield 'nstar', np.asarray(self.urn.nstar)
        if self.predict:
            W_pred, Y_pred = self.sample_predictive()
            yield 'W_pred', W_pred
            yield 'Y_pred', Y_pred
        if self.loglik:
            yield 'loglik', self.loglikelihood()

    def forward(self,data: 'EcoData'):
        self._check_input(data)
        self.sample_W()
        self.urn(self.Wstar,self.mix.alpha)
        self.mix(self.urn.z)
