import numpy as np
from scipy.stats import gamma, beta

from ..utils import mvn_logpdf_precision, log_normalize, sample_cumulative
from .module import Module
from .parameters import NormalWishart

np.seterr(all='ignore')


class InfiniteMixture(Module):
    r'''
        Concentration parameter of a Dirichlet process, alpha ~ Gamma(a0, b0).

        Auxiliary variable Gibbs step (Escobar & West, 1995):
            eta ~ Beta(alpha + 1, N)
            alpha ~ p Gamma(a0 + K, b0 - log eta) + (1-p) Gamma(a0 + K - 1, b0 - log eta)
        with p = (a0 + K - 1) / (N (b0 - log eta)).
    '''
    def __init__(self,alpha=1,a0=1,b0=0.1,learn=True):
        super().__init__()
        if alpha <= 0:
            raise ValueError("alpha must be positive")
        if a0 <= 0 or b0 <= 0:
            raise ValueError("a0 and b0 must be positive")
        self.learn = learn

        # Control parameters of the prior
        self.a = float(a0)
        self.b = float(b0)
        self.N = 0

        self._parameters["eta"] = np.asarray(.5)
        self._parameters["alpha"] = np.asarray(alpha,dtype=float)

    def sample_eta(self):
        a = self.alpha + 1.0
        b = self.N
        self._parameters['eta'] = np.asarray(beta.rvs(a,b,random_state=self.rng))

    def sample_alpha(self,K):
        b_hat = self.b - np.log(self.eta)
        if not np.isfinite(b_hat):
            b_hat = self.b

        pi_eta = (self.a + K - 1) / (self.N * b_hat)
        if self.rng.uniform() < pi_eta:
            a_hat = self.a + K
        else:
            a_hat = self.a + K - 1
        alpha = gamma.rvs(a=a_hat,scale=1/b_hat,random_state=self.rng)
        # underflow for tiny shapes
        self._parameters['alpha'] = np.asarray(max(alpha,np.finfo(float).tiny))

    def forward(self,z):
        z = np.asarray(z).ravel().astype(int)
        self.N = z.shape[0]
        if self.learn:
            self.sample_eta()
            self.sample_alpha(len(np.unique(z)))


class PolyaUrn(Module):
    r'''
        Dirichlet process mixture of bivariate normals over the transformed pairs,
        one (mu, Sigma) per observation.

        Each sweep visits the observations in index order and either copies the
        parameter of another observation (weight: its normal density) or opens a
        new table (weight: alpha times the prior predictive, multivariate-t). The
        visit order matters, later observations see the updated earlier ones.
        A remix step then redraws the parameter of every table from its full
        membership and relabels the tables 0..nstar-1.
    '''
    def __init__(self,mu0=0,tau0=2,nu0=4,S0=10):
        super().__init__()
        self.theta = NormalWishart(mu0=mu0,tau0=tau0,nu0=nu0,S0=S0)
        self.nstar = 0
        self._next_label = 0

        self._parameters['z'] = np.zeros(0,dtype=int)
        self._parameters['mu'] = np.zeros((0,2))
        self._parameters['Sigma'] = np.zeros((0,2,2))
        self._parameters['InvSigma'] = np.zeros((0,2,2))

    @property
    def N(self):
        return self.z.shape[0]

    def initialize(self,N):
        r'''
        Every observation starts at its own table, drawn from the base measure.
        '''
        mu = np.zeros((N,2))
        Sigma = np.zeros((N,2,2))
        InvSigma = np.zeros((N,2,2))
        empty = np.zeros((0,2))
        for i in range(N):
            mu[i], Sigma[i], InvSigma[i] = self.theta.sample(empty)
        self._parameters['mu'] = mu
        self._parameters['Sigma'] = Sigma
        self._parameters['InvSigma'] = InvSigma
        self._parameters['z'] = np.arange(N)
        self.nstar = N
        self._next_label = N

    def log_weights(self,i,y,alpha):
        r'''
        Unnormalized log weights for observation i: every other observation in
        index order, then the new table.
        '''
        others = np.delete(np.arange(self.N),i)
        logrho = np.zeros(others.shape[0]+1)
        logrho[:-1] = mvn_logpdf_precision(y[i],self.mu[others],self.InvSigma[others])
        logrho[-1] = np.log(alpha) + self.theta.prior_predictive(y[i])
        return logrho, others

    def cumulative(self,i,y,alpha):
        logrho, others = self.log_weights(i,y,alpha)
        logrho, _ = log_normalize(logrho)
        cum = np.cumsum(np.exp(logrho))
        return cum / cum[-1], others

    def _sample_z_single(self,i,y,alpha):
        cum, others = self.cumulative(i,y,alpha)
        j = sample_cumulative(cum,self.rng.uniform())
        if j == others.shape[0]:
            mu, Sigma, InvSigma = self.theta.sample(y[[i]])
            self._parameters['mu'][i] = mu
            self._parameters['Sigma'][i] = Sigma
            self._parameters['InvSigma'][i] = InvSigma
            self._parameters['z'][i] = self._next_label
            self._next_label += 1
        else:
            j = others[j]
            self._parameters['mu'][i] = self.mu[j]
            self._parameters['Sigma'][i] = self.Sigma[j]
            self._parameters['InvSigma'][i] = self.InvSigma[j]
            self._parameters['z'][i] = self.z[j]

    def _sample_z(self,y,alpha):
        for i in range(self.N):
            self._sample_z_single(i,y,alpha)

    def _remix(self,y):
        order = np.argsort(self.z,kind='stable')
        _, starts = np.unique(self.z[order],return_index=True)
        groups = np.split(order,starts[1:])

        z = np.zeros_like(self.z)
        for k, idx in enumerate(groups):
            mu, Sigma, InvSigma = self.theta.sample(y[idx])
            self._parameters['mu'][idx] = mu
            self._parameters['Sigma'][idx] = Sigma
            self._parameters['InvSigma'][idx] = InvSigma
            z[idx] = k
        self._parameters['z'] = z
        self.nstar = len(groups)
        self._next_label = self.nstar

    def forward(self,y,alpha):
        if y.shape[0] != self.N:
            self.initialize(y.shape[0])
        self._sample_z(y,alpha)
        self._remix(y)
