"""First-party SageMaker algorithms trained on RecordIO-protobuf record sets."""
from .amazon_estimator import (  # noqa: F401
    AmazonAlgorithmEstimatorBase,
    FileSystemRecordSet,
    RecordSet,
    upload_numpy_to_s3_shards,
)
from .common import (  # noqa: F401
    RecordDeserializer,
    RecordSerializer,
    read_records,
    read_recordio,
    write_numpy_to_dense_tensor,
    write_spmatrix_to_sparse_tensor,
)
from .factorization_machines import (  # noqa: F401
    FactorizationMachines,
    FactorizationMachinesModel,
    FactorizationMachinesPredictor,
)
from .hyperparameter import Hyperparameter  # noqa: F401
from .ipinsights import IPInsights, IPInsightsModel, IPInsightsPredictor  # noqa: F401
from .kmeans import KMeans, KMeansModel, KMeansPredictor  # noqa: F401
from .knn import KNN, KNNModel, KNNPredictor  # noqa: F401
from .lda import LDA, LDAModel, LDAPredictor  # noqa: F401
from .linear_learner import LinearLearner, LinearLearnerModel, LinearLearnerPredictor  # noqa: F401
from .ntm import NTM, NTMModel, NTMPredictor  # noqa: F401
from .object2vec import Object2Vec, Object2VecModel  # noqa: F401
from .pca import PCA, PCAModel, PCAPredictor  # noqa: F401
from .randomcutforest import RandomCutForest, RandomCutForestModel, RandomCutForestPredictor  # noqa: F401
