from .core import Gibbs
from .dataclass import EcoData
from .modules.eco import EcoDP


def eco_np(X,Y,supplement=None,x1_W1=None,x0_W2=None,link='logit',mu0=0,tau0=2,nu0=4,S0=10,alpha=None,a0=1,b0=0.1,
          predict=False,loglik=False,n_draws=5000,burnin=0,thin=1,seed=None,verbose=False,interrupt=None):
    r'''
    Fits the nonparametric (Dirichlet process) model of ecological inference.

    alpha: fixed concentration; when None it starts at 1 and is updated.

    Returns the chain, a dict of numpy arrays with one row per kept draw:
        mu (n x 2), Sigma (n x 3, [S00, S01, S11]), W (n x 2), alpha, nstar,
        and W_pred, Y_pred when predict is True, loglik when loglik is True.

    Examples
    --------
    >>> chain = eco_np(X=[.3,.7],Y=[.4,.6],n_draws=500,burnin=100,seed=1)
    >>> chain['W'].shape
    (400, 2, 2)
    '''
    data = EcoData(X=X,Y=Y,survey=supplement,x1_W1=x1_W1,x0_W2=x0_W2)
    learn = alpha is None
    model = EcoDP(link=link,mu0=mu0,tau0=tau0,nu0=nu0,S0=S0,alpha=1.0 if learn else alpha,a0=a0,b0=b0,
                  learn=learn,predict=predict,loglik=loglik,seed=seed)
    sampler = Gibbs()
    sampler.fit(data,model,samples=n_draws,burn_in=burnin,thin=thin,verbose=verbose,interrupt=interrupt)
    return sampler.get_chain()


# Name of the R front end
ecoNP = eco_np
