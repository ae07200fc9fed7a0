import gradio as gr

from inferbench.cli import build_controller
from inferbench.config import BenchConfig, load_config
from inferbench.logging_utils import setup_logging
from inferbench.session import SessionController


def render(controller: SessionController):
    """Map the session snapshot onto the page components."""
    snap = controller.snapshot()

    if snap.model_ready:
        header = f"**Model Load Time:** {snap.model_load_latency_ms:.2f}ms"
    elif snap.error:
        header = f"⚠️ Loading model failed: {snap.error}"
    else:
        header = "Loading model..."

    picture = None
    predictions_md = ""
    timings_md = ""
    if controller.image is not None:
        size = snap.display_size
        picture = controller.image.pixels
        if size is not None:
            picture = picture.resize((size.width, size.height))
        predictions_md = "\n".join(f"- {p.label}: {p.confidence:.4f}" for p in snap.predictions)
        timings_md = (
            f"Image inference time: {snap.last_inference_ms:.2f}ms\n\n"
            f"Average inference time: {snap.average_inference_ms:.2f}ms"
        )
    if snap.error and snap.model_ready:
        timings_md += f"\n\n⚠️ {snap.error}"

    button = gr.update(interactive=snap.model_ready and not controller.busy)
    return header, button, picture, predictions_md, timings_md


def build_demo(controller: SessionController) -> gr.Blocks:
    async def on_page_load():
        # Waits on the shared load when another tab started it.
        await controller.initialize()
        return render(controller)

    async def on_load_random_image():
        await controller.request_new_image()
        return render(controller)

    with gr.Blocks(title="Inference Benchmark") as demo:
        gr.Markdown("# 🖼️ Image Classification Benchmark")
        with gr.Row():
            load_btn = gr.Button("Load Random Image", variant="primary", interactive=False)
            header = gr.Markdown("Loading model...")
        image = gr.Image(type="pil", label="test-image", interactive=False)
        predictions = gr.Markdown()
        timings = gr.Markdown()

        outputs = [header, load_btn, image, predictions, timings]
        demo.load(fn=on_page_load, outputs=outputs)
        load_btn.click(fn=on_load_random_image, outputs=outputs)

    return demo


if __name__ == "__main__":
    bench = BenchConfig.from_dict(load_config())
    setup_logging(bench.log_level)
    demo = build_demo(build_controller(bench))
    demo.launch(server_port=7861)
