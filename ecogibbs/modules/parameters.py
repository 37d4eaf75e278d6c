import numpy as np
from scipy.stats import wishart, multivariate_normal as mvn, multivariate_t as mvt
import scipy.linalg as la

from ..utils import makesymmetric
from .module import Module


class NormalWishart(Module):
    r'''
        Normal-Wishart prior over the mean and covariance of the transformed pairs,
        with its conjugate posterior update.

            Sigma^-1 ~ Wishart(nu0, S0^-1)
            mu | Sigma ~ N(mu0, Sigma / tau0)

        Gibbs sampling.
    '''
    def __init__(self,mu0=0,tau0=2,nu0=4,S0=10,output_dim=2):
        super(NormalWishart,self).__init__()
        self._dimo = output_dim
        self.define_priors(mu0,tau0,nu0,S0)
        self.initialize_parameters()

    @property
    def output_dim(self):
        return self._dimo

    def define_priors(self,mu0,tau0,nu0,S0):
        mu0 = np.asarray(mu0,dtype=float)
        if mu0.ndim == 0:
            mu0 = np.full(self.output_dim,float(mu0))
        if mu0.shape != (self.output_dim,):
            raise ValueError("mu0 must be a scalar or have length {}".format(self.output_dim))
        S0 = np.asarray(S0,dtype=float)
        if S0.ndim == 0:
            S0 = np.eye(self.output_dim)*float(S0)
        if S0.shape != (self.output_dim,self.output_dim):
            raise ValueError("S0 must be a scalar or a {0} x {0} matrix".format(self.output_dim))
        if np.any(np.linalg.eigvalsh(makesymmetric(S0)) <= 0):
            raise ValueError("S0 must be positive definite")
        if tau0 <= 0:
            raise ValueError("tau0 must be positive")
        if nu0 <= self.output_dim - 1:
            raise ValueError("nu0 must be larger than {}".format(self.output_dim-1))

        self.mu0 = mu0
        self.tau0 = float(tau0)
        self.nu0 = float(nu0)
        self.S0 = makesymmetric(S0)

    def initialize_parameters(self):
        self._parameters["mu"] = self.mu0.copy()
        self._parameters["Sigma"] = self.S0.copy()
        self._parameters["InvSigma"] = la.inv(self.S0)

    def posterior(self,y):
        r'''
        Posterior hyperparameters (mu_n, tau_n, S_n, nu_n) given the member set y (N x dim), N >= 0.
        '''
        y = np.asarray(y,dtype=float).reshape(-1,self.output_dim)
        N = y.shape[0]
        if N == 0:
            return self.mu0.copy(), self.tau0, self.S0.copy(), self.nu0
        y_bar = y.mean(0)
        y_eps = y - y_bar
        tauN = self.tau0 + N
        muN = (self.tau0*self.mu0 + N*y_bar) / tauN
        d = y_bar - self.mu0
        SN = self.S0 + y_eps.T @ y_eps + self.tau0*N/tauN * np.outer(d,d)
        nuN = self.nu0 + N
        return muN, tauN, makesymmetric(SN), nuN

    def sample(self,y):
        r'''
        One draw of (mu, Sigma, Sigma^-1) from the posterior given y.
        '''
        muN, tauN, SN, nuN = self.posterior(y)
        W = makesymmetric(la.inv(SN))
        Lambda = np.atleast_2d(wishart.rvs(df=nuN,scale=W,random_state=self.rng))
        Lambda = makesymmetric(Lambda)
        Sigma = makesymmetric(la.inv(Lambda))
        mu = np.atleast_1d(mvn.rvs(muN,Sigma/tauN,random_state=self.rng))
        return mu, Sigma, Lambda

    def predictive_parameters(self,m=None,k=None,S=None,nu=None):
        r'''
        Multivariate-t parameters of the predictive for one new observation
        (prior predictive when called without arguments).
        '''
        if m is None:
            m, k, S, nu = self.mu0, self.tau0, self.S0, self.nu0
        _nu = nu - self.output_dim + 1.0
        _S = (k + 1.0)/(k*_nu) * S
        return m, _S, _nu

    def prior_predictive(self,y):
        _m, _S, _nu = self.predictive_parameters()
        return mvt.logpdf(y,loc=_m,shape=_S,df=_nu)

    def forward(self,y):
        mu, Sigma, Lambda = self.sample(y)
        self._parameters["mu"] = mu
        self._parameters["Sigma"] = Sigma
        self._parameters["InvSigma"] = Lambda
        return mu, Sigma, Lambda
