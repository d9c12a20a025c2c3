# ===============================================================
#  web_app.py
#  Playground: configure, train and query a basicnn network
#  streamlit run basicnn/web_app.py
# ===============================================================

from datetime import datetime

import numpy as np
import pandas as pd
import streamlit as st

from basicnn import dataset_loader
from basicnn.neural_network import DEFAULT_CONFIG, Network
from basicnn.training_lock import (
    try_acquire_lock,
    release_lock,
    is_training_in_progress,
)


# ===============================================================
#    CONFIG STREAMLIT
# ===============================================================

st.set_page_config(
    page_title="basicnn playground",
    layout="wide"
)

st.title("🧠 basicnn playground")
st.caption("Train a small sigmoid perceptron sample by sample and watch the loss go down.")


# ===============================================================
#    GLOBAL STATE
# ===============================================================

if "log_text" not in st.session_state:
    st.session_state.log_text = ""

if "network" not in st.session_state:
    st.session_state.network = None

if "current_run" not in st.session_state:
    st.session_state.current_run = None

if "metrics_history" not in st.session_state:
    st.session_state.metrics_history = []

if "log_placeholder" not in st.session_state:
    st.session_state.log_placeholder = None


# ===============================================================
#    UTILITIES
# ===============================================================

def append_log(msg: str):
    st.session_state.log_text += msg + "\n"

    placeholder = st.session_state.get("log_placeholder", None)
    if placeholder is not None:
        placeholder.text_area("Output", st.session_state.log_text, height=300)


def clear_log():
    st.session_state.log_text = ""


def default_dataset_text():
    lines = ["# x1, x2, label"]
    for data in dataset_loader.load_data():
        features = ", ".join(f"{v:g}" for v in data.variables)
        lines.append(f"{features}, {data.output:g}")
    return "\n".join(lines)


def weight_summary(net: Network):
    rows = []
    for i, layer in enumerate(net.layers):
        for j, neuron in enumerate(layer):
            rows.append({
                "layer": f"hidden {i}",
                "neuron": j,
                "weights": np.round(neuron.weights, 4).tolist(),
                "bias": round(neuron.bias, 4),
            })
    rows.append({
        "layer": "output",
        "neuron": 0,
        "weights": np.round(net.prediction.weights, 4).tolist(),
        "bias": round(net.prediction.bias, 4),
    })
    return pd.DataFrame(rows)


# ===============================================================
#   SIDEBAR – HYPERPARAMETERS
# ===============================================================

st.sidebar.header("🎛️ Hyperparameters")

epochs = st.sidebar.slider("Epochs", 1, 5000, DEFAULT_CONFIG["epochs"], step=10)
learning_rate = st.sidebar.slider(
    "Learning rate (η)", 0.01, 1.0, DEFAULT_CONFIG["learning_rate"], step=0.01)

st.sidebar.markdown("---")
st.sidebar.subheader("🧱 Architecture")

depth = st.sidebar.slider("Hidden layers", 1, 6, DEFAULT_CONFIG["depth"])
neurons_per_layer = st.sidebar.slider(
    "Neurons per layer", 1, 16, DEFAULT_CONFIG["neurons_per_layer"])

st.sidebar.markdown("---")
st.sidebar.subheader("📄 Dataset")

dataset_text = st.sidebar.text_area(
    "One sample per line: x1, ..., xn, label",
    value=default_dataset_text(),
    height=200,
)

tab_train, tab_predict, tab_weights = st.tabs([
    "🚀 Training",
    "🔮 Predict",
    "🧮 Weights",
])


# ===============================================================
#   TRAINING
# ===============================================================

def make_epoch_callback(run_id):
    def epoch_callback(epoch, metrics, network: Network):
        entry = {"run_id": run_id}
        entry.update(metrics)
        st.session_state.metrics_history.append(entry)

    return epoch_callback


def run_single_training(config, training_data):
    """
    - Take the global lock
    - Build a fresh network from `config`
    - Train with log + epoch callbacks
    - Release the lock
    """
    if not try_acquire_lock():
        st.error("🚫 A training is already running in another session.")
        return None

    try:
        clear_log()

        net = Network.from_config(config)
        run_id = f"R{datetime.now().strftime('%H%M%S')}"

        st.session_state.current_run = {
            "run_id": run_id,
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "config": dict(config),
            "initial_loss": net.mean_squared_error(training_data),
        }
        st.session_state.metrics_history = []

        append_log(f"=== NEW RUN {run_id} ===")
        append_log(f"Architecture: {config['depth']} x {config['neurons_per_layer']} + 1 output")
        append_log(f"Epochs={config['epochs']}, eta={config['learning_rate']}")

        net.train(
            config["epochs"],
            training_data,
            log_fn=append_log,
            epoch_callback=make_epoch_callback(run_id),
            log_every=max(1, config["epochs"] // 10),
        )

        final_loss = net.mean_squared_error(training_data)
        st.session_state.current_run["final_loss"] = final_loss
        st.session_state.network = net
        append_log(f"Final mse: {final_loss:.6f}")
        return net

    finally:
        release_lock()
        append_log("Lock released.")


with tab_train:
    col_left, col_right = st.columns([2, 1])

    with col_left:
        st.subheader("🚀 Train a new network")

        start_training = st.button("🔥 Start Training", disabled=is_training_in_progress())

        if is_training_in_progress():
            st.warning("⏳ A training is already running. Please wait...")

        st.markdown("### 📡 Terminal")

        st.session_state.log_placeholder = st.empty()
        st.session_state.log_placeholder.text_area(
            "Output",
            value=st.session_state.log_text,
            height=300,
        )

        if start_training:
            config = {
                "depth": depth,
                "neurons_per_layer": neurons_per_layer,
                "learning_rate": learning_rate,
                "epochs": epochs,
            }
            try:
                training_data = dataset_loader.parse_samples(dataset_text)
                if not training_data:
                    st.error("The dataset is empty.")
                else:
                    run_single_training(config, training_data)
            except ValueError as e:
                st.error(f"Invalid input: {e}")

    with col_right:
        st.subheader("📝 Last run")

        run = st.session_state.current_run
        if run is None:
            st.info("No run yet.")
        else:
            st.write(f"**Run ID :** `{run['run_id']}`")
            st.write(f"**Date :** `{run['timestamp']}`")
            st.metric("Initial mse", f"{run['initial_loss']:.4f}")
            if "final_loss" in run:
                st.metric(
                    "Final mse",
                    f"{run['final_loss']:.4f}",
                    delta=f"{run['final_loss'] - run['initial_loss']:.4f}",
                    delta_color="inverse",
                )

    st.markdown("---")
    st.markdown("### 🧠 Loss per epoch")

    if not st.session_state.metrics_history:
        st.info("No metrics yet. Train a network.")
    else:
        df = pd.DataFrame(st.session_state.metrics_history)
        st.line_chart(df.set_index("epoch")["train_loss"], height=300)


# ===============================================================
#   PREDICTION
# ===============================================================

with tab_predict:
    st.subheader("🔮 Query the trained network")

    net = st.session_state.network
    if net is None:
        st.info("🎯 No active network. Train one first.")
    else:
        queries = dataset_loader.load_queries()
        rows = [
            {"name": name, "variables": list(q.variables), "prediction": net.predict(q)}
            for name, q in queries.items()
        ]
        st.dataframe(pd.DataFrame(rows), use_container_width=True)

        raw = st.text_input("Features (comma separated)", value="-7, -3")
        if st.button("Predict"):
            try:
                variables = [float(v) for v in raw.split(",") if v.strip()]
                st.metric("Prediction", f"{net.predict(variables):.4f}")
            except ValueError as e:
                st.error(f"Invalid input: {e}")


# ===============================================================
#   WEIGHTS
# ===============================================================

with tab_weights:
    st.subheader("🧮 Learned parameters")

    net = st.session_state.network
    if net is None:
        st.info("No active network.")
    else:
        st.dataframe(weight_summary(net), use_container_width=True)
