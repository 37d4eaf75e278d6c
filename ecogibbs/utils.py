import numpy as np
from scipy.special import logsumexp

# W values never touch the boundary of the unit interval.
W_EPS = 1e-6


def get_median(stacked):
    return np.median(stacked,0).astype(stacked.dtype)

def get_mean(stacked):
    return np.mean(stacked,0)

def makesymmetric(A):
    return .5*(A + np.swapaxes(A,-1,-2))

def mvn_logpdf_precision(y,mu,iSigma):
    """
    Multivariate normal log-density parameterized by the (cached) inverse covariance.
    y: T x M, iSigma M x M or T x M x M.
    """
    y_eps = np.atleast_2d(y-mu)
    iSigma = np.asarray(iSigma)
    if iSigma.ndim == 2:
        iSigma = iSigma[None,:,:]
    quad = (y_eps[:,None,:] @ iSigma @ y_eps[:,:,None]).ravel()
    logdet = np.linalg.slogdet(iSigma)[-1]
    return -0.5*(y_eps.shape[-1]*np.log(2*np.pi) - logdet + quad)

def log_normalize(alpha):
    c = logsumexp(alpha)
    if np.isinf(c):
        alpha = np.zeros_like(alpha)
        c = logsumexp(alpha)
    alpha = alpha - c
    return alpha, c

def sample_cumulative(cum,u):
    """
    Inverse-cdf draw: first index whose cumulative weight exceeds u.
    """
    idx = np.searchsorted(cum,u,side='right')
    return int(min(idx,len(cum)-1))

def clamp(w,eps=W_EPS):
    return np.clip(w,eps,1.0-eps)

def cov2triu(Sigma):
    # (..., 2, 2) -> (..., 3) as [S00, S01, S11]
    return np.stack([Sigma[...,0,0],Sigma[...,0,1],Sigma[...,1,1]],-1)
