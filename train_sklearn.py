"""
Feature-based trainer: TF-IDF + Logistic Regression / linear SVM on SST-5, tracked with MLflow.

- Loads data/sst/sst_{train,dev,test}.txt
- Builds the same Pipeline(cleaner -> tfidf -> clf) the dashboards fit on the fly
- Evaluates on dev + test (accuracy, macro precision/recall/F1)
- Saves models/<method>/model.joblib; point the dashboards at it with
    SENTIMENT_LOGISTIC_PATH=models/logistic/model.joblib
- Logs params/metrics/artifacts to MLflow

Run:
  python train_sklearn.py --method logistic
  python train_sklearn.py --method svm --run_name svm_sst5
"""

import argparse
import os

import joblib
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import mlflow
import mlflow.sklearn

from sklearn.metrics import (
    accuracy_score, precision_recall_fscore_support, classification_report, confusion_matrix
)

from utils.config import CLASS_NAMES
from utils.data_prep import read_sst
from utils.explain import build_pipeline

# ----------------- helpers -----------------

def ensure_dir(p): os.makedirs(p, exist_ok=True)

def plot_cm(y_true, y_pred, labels, title, out_png):
    cm = confusion_matrix(y_true, y_pred, labels=labels)
    fig = plt.figure()
    plt.imshow(cm, interpolation="nearest")
    plt.title(title); plt.xlabel("Predicted"); plt.ylabel("True")
    plt.xticks(range(len(labels)), labels); plt.yticks(range(len(labels)), labels)
    for i in range(cm.shape[0]):
        for j in range(cm.shape[1]):
            plt.text(j, i, cm[i, j], ha="center", va="center")
    plt.tight_layout(); ensure_dir(os.path.dirname(out_png)); plt.savefig(out_png, dpi=150); plt.close(fig)
    return out_png

def metrics(y_true, y_pred):
    acc = accuracy_score(y_true, y_pred)
    pr, rc, f1, _ = precision_recall_fscore_support(y_true, y_pred, average="macro", zero_division=0)
    return {"accuracy": acc, "precision": pr, "recall": rc, "f1": f1}

# ----------------- training -----------------

def run_training(method: str, sst_dir: str, models_dir: str, run_name: str, seed: int = 42, docs_dir: str = "docs"):
    train = read_sst(os.path.join(sst_dir, "sst_train.txt"))
    dev   = read_sst(os.path.join(sst_dir, "sst_dev.txt"))
    test  = read_sst(os.path.join(sst_dir, "sst_test.txt"))
    print(f"[data] train={len(train):,} dev={len(dev):,} test={len(test):,}")

    pipe = build_pipeline(method, seed=seed)
    pipe.fit(train["text"].tolist(), train["label"].tolist())

    def eval_split(name, df):
        y_pred = pipe.predict(df["text"].tolist())
        m = metrics(df["label"].tolist(), y_pred)
        print(f"\n== {name} metrics =="); print(m)
        return y_pred, m

    y_dev_pred,  dev_m  = eval_split("dev",  dev)
    y_test_pred, test_m = eval_split("test", test)

    # Artifacts
    ensure_dir(docs_dir)
    dev_cm  = plot_cm(dev["label"],  y_dev_pred,  CLASS_NAMES, f"Confusion Matrix (dev) - {method}",
                      os.path.join(docs_dir, f"confusion_dev_{method}.png"))
    test_cm = plot_cm(test["label"], y_test_pred, CLASS_NAMES, f"Confusion Matrix (test) - {method}",
                      os.path.join(docs_dir, f"confusion_test_{method}.png"))
    report_path = os.path.join(docs_dir, f"classification_report_test_{method}.txt")
    with open(report_path, "w", encoding="utf-8") as f:
        f.write(classification_report(test["label"], y_test_pred, digits=3, zero_division=0))

    out_dir = os.path.join(models_dir, method)
    ensure_dir(out_dir)
    model_path = os.path.join(out_dir, "model.joblib")
    joblib.dump(pipe, model_path)
    print(f"\n[saved] {model_path}")

    mlflow.set_experiment(f"sst5_{method}")
    with mlflow.start_run(run_name=run_name):
        for k, v in pipe.named_steps["tfidf"].get_params().items():
            mlflow.log_param(f"tfidf_{k}", v)
        mlflow.log_param("clf", type(pipe.named_steps["clf"]).__name__)
        mlflow.log_param("seed", seed)
        for k, v in dev_m.items(): mlflow.log_metric(f"dev_{k}", float(v))
        for k, v in test_m.items(): mlflow.log_metric(f"test_{k}", float(v))
        mlflow.log_artifact(dev_cm); mlflow.log_artifact(test_cm); mlflow.log_artifact(report_path)
        mlflow.sklearn.log_model(pipe, artifact_path="model")

    return model_path, test_m

# ----------------- CLI -----------------

def parse_args():
    ap = argparse.ArgumentParser()
    ap.add_argument("--method", choices=["logistic", "svm"], default="logistic")
    ap.add_argument("--sst_dir", default="data/sst")
    ap.add_argument("--models_dir", default="models")
    ap.add_argument("--run_name", default=None)
    ap.add_argument("--seed", type=int, default=42)
    return ap.parse_args()

if __name__ == "__main__":
    args = parse_args()
    run_training(args.method, args.sst_dir, args.models_dir, args.run_name or f"{args.method}_tfidf", args.seed)
